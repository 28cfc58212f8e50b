import threading


def get_thread_id() -> int:
    return threading.get_ident()
