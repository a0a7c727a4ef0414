from .bootstrap import Services, build_services, wire_services
from .http import create_app

__all__ = ["Services", "build_services", "create_app", "wire_services"]
