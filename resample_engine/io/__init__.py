from .instance_store import dumps_instance, load_instance, loads_instance, save_instance

__all__ = ["dumps_instance", "loads_instance", "save_instance", "load_instance"]
