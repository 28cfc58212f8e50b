class InterceptedCallError(RuntimeError):
    """Falha de um método interceptado; a exceção original fica em ``__cause__``."""

    def __init__(self, class_name: str, method_name: str, cause: BaseException):
        super().__init__(f"{class_name}.{method_name} failed: {cause}")
        self.class_name = class_name
        self.method_name = method_name
