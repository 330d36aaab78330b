"""
Component registry for the desk API
This module tracks every component service and the per-app instances.
"""
from flask import current_app

EXTENSION_KEY = 'resolution_desk'


class ComponentRegistry:
    """Registry for desk component service classes"""

    def __init__(self):
        self.components = {}

    def register_component(self, name, component_class):
        """Register a component service class"""
        self.components[name] = component_class

    def get_component(self, name):
        """Get a registered component service class"""
        return self.components.get(name)

    def get_all_components(self):
        """Get all registered component service classes"""
        return self.components


# Global registry instance
registry = ComponentRegistry()


def register_component(name):
    """Decorator for registering component services"""
    def decorator(component_class):
        registry.register_component(name, component_class)
        return component_class
    return decorator


def install_service(app, name, service):
    """Attach a service instance to the Flask app"""
    app.extensions.setdefault(EXTENSION_KEY, {})[name] = service
    return service


def build_service(app, name):
    """Instantiate the registered service for name with the app's shared state"""
    state = app.extensions[EXTENSION_KEY]
    service_class = registry.get_component(name)
    service = service_class(config=app.config, audit=state['audit'], clock=state.get('clock'))
    if app.config.get('SEED_DEMO_DATA', True) and hasattr(service, 'seed'):
        service.seed()
    return install_service(app, name, service)


def get_service(name):
    """Get the service instance for name bound to the current app"""
    return current_app.extensions[EXTENSION_KEY][name]


__all__ = ['ComponentRegistry', 'registry', 'register_component',
           'install_service', 'build_service', 'get_service']
