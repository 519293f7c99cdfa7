"""Adapter between the plugin host's event bus and the provider."""
import logging
from typing import Callable, Dict

import yaml

from .errors import PluginRegistrationError
from .models import Cluster, ClusterConfig, Event, EventResponse, Plan
from .provider import cluster_provider
from .reset import handle_cluster_reset

logger = logging.getLogger(__name__)

EVENT_CLUSTER_PROVIDER = "cluster.provider"
EVENT_CLUSTER_RESET = "cluster.reset"

Provider = Callable[[Cluster], Plan]
EventHandler = Callable[[Event], EventResponse]


class ClusterPlugin:
    """Dispatches bus events to the provider and the registered handlers.

    Args:
        provider: Builds the plan for a cluster input
    """

    def __init__(self, provider: Provider):
        if provider is None:
            raise PluginRegistrationError("a cluster provider is required")
        self.provider = provider
        self._handlers: Dict[str, EventHandler] = {}
        self.register(EVENT_CLUSTER_PROVIDER, self._handle_provider)

    @property
    def events(self):
        return sorted(self._handlers)

    def register(self, event_name: str, handler: EventHandler) -> None:
        """Register the handler of a bus event.

        Raises:
            PluginRegistrationError: If the name is empty, the handler missing
                or the event already handled
        """
        if not event_name or handler is None:
            raise PluginRegistrationError("event handlers need an event name and a callable")
        if event_name in self._handlers:
            raise PluginRegistrationError(f"event {event_name} already has a handler")
        self._handlers[event_name] = handler
        logger.debug(f"Registered handler for {event_name}")

    def _handle_provider(self, event: Event) -> EventResponse:
        response = EventResponse()
        try:
            config = ClusterConfig.from_event_data(event.data)
        except (ValueError, yaml.YAMLError) as e:
            response.error = f"failed to parse cluster input: {e}"
            logger.error(response.error)
            return response

        if config.cluster is None:
            logger.info("Provider event without cluster section, returning an empty plan")
            return response

        plan = self.provider(config.cluster)
        response.data = plan.to_yaml()
        return response

    def handle(self, event: Event) -> EventResponse:
        """Dispatch an event; provider errors propagate to the caller."""
        handler = self._handlers.get(event.name)
        if handler is None:
            logger.warning(f"No handler for event {event.name}")
            return EventResponse(error=f"unknown event: {event.name}")
        logger.info(f"Handling event {event.name}")
        return handler(event)

    def run(self, event_name: str, raw_event: str) -> EventResponse:
        """Handle a JSON encoded event delivered for ``event_name``."""
        try:
            event = Event.model_validate_json(raw_event or "{}")
        except ValueError as e:
            return EventResponse(error=f"failed to decode event: {e}")
        if not event.name:
            event.name = event_name
        if event.name != event_name:
            logger.warning(f"Event {event.name} delivered as {event_name}, using {event_name}")
            event.name = event_name
        return self.handle(event)


def build_plugin() -> ClusterPlugin:
    """Return the plugin with the provider and reset handlers registered."""
    plugin = ClusterPlugin(provider=cluster_provider)
    plugin.register(EVENT_CLUSTER_RESET, handle_cluster_reset)
    return plugin
