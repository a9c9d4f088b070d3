"""
Registry for component modules.

This module provides a registry for component modules to register themselves
and a decorator for registering component classes.
"""

from typing import Any, Dict, List, Optional, Type

from vps_setup.common.exceptions import UnknownComponentError
from vps_setup.installer.base_component import BaseComponent


class ComponentRegistry:
    """
    Registry for component modules.

    Components are registered once at import time and never added or removed
    afterwards.
    """

    _registry: Dict[str, Type[BaseComponent]] = {}

    @classmethod
    def register(cls, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Decorator for registering component classes.

        Args:
            name: The component id, e.g. "container-engine".
            metadata: Display name, category, description and listing order.

        Returns:
            A decorator function that registers the component class.
        """

        def decorator(
            component_class: Type[BaseComponent],
        ) -> Type[BaseComponent]:
            if name in cls._registry:
                raise ValueError(
                    f"Component with name '{name}' already registered"
                )
            if not component_class.handler_name:
                raise ValueError(f"Component '{name}' declares no handler")

            component_class.component_id = name
            component_class.metadata = {
                **BaseComponent.metadata,
                **(metadata or {}),
            }
            cls._registry[name] = component_class
            return component_class

        return decorator

    @classmethod
    def get_component(cls, name: str) -> BaseComponent:
        """
        Get a component instance by id.

        Raises:
            UnknownComponentError: If no component with the given id is registered.
        """
        if name not in cls._registry:
            raise UnknownComponentError(name)
        return cls._registry[name]()

    @classmethod
    def get_all_components(cls) -> Dict[str, Type[BaseComponent]]:
        """
        Get all registered components.

        Returns:
            A dictionary mapping component ids to component classes, in
            listing order.
        """
        ordered = sorted(
            cls._registry.items(),
            key=lambda item: (item[1].metadata.get("order", 100), item[0]),
        )
        return dict(ordered)

    @classmethod
    def get_components_by_category(cls, category: str) -> List[str]:
        return [
            name
            for name, component_class in cls.get_all_components().items()
            if component_class.metadata.get("category") == category
        ]

    @classmethod
    def get_batch_components(cls) -> List[str]:
        """Ids of the install targets of the "install everything" flow, in order."""
        return [
            name
            for name, component_class in cls.get_all_components().items()
            if component_class.batch and not component_class.preparatory
        ]

    @classmethod
    def get_preparatory_components(cls) -> List[str]:
        """Ids of the actions the batch flow runs before any install."""
        return [
            name
            for name, component_class in cls.get_all_components().items()
            if component_class.batch and component_class.preparatory
        ]
