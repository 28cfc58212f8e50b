from enum import Enum


class AnnotationType(str, Enum):
    CONTROLLER = "controller"
    SERVICE = "service"
