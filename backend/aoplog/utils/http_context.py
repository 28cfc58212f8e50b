from aoplog.observability.request_id import get_client_ip

UNKNOWN_IP = "unknown"


def extract_client_ip(x_forwarded_for: str, fallback: str | None) -> str:
    if x_forwarded_for:
        for value in x_forwarded_for.split(","):
            candidate = value.strip()
            if candidate:
                return candidate
    return fallback or UNKNOWN_IP


def get_ip_address() -> str:
    # Fora de um request HTTP não há IP de origem.
    return get_client_ip() or UNKNOWN_IP
