"""
Palette - Wires settings, providers, session and dispatcher together.

Usage:
    palette = create_palette(catalog=my_app_catalog, listener=my_ui)
    palette.session.submit("saf")
    outcome = palette.dispatcher.dispatch(selected.action)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

from omnibar import config
from omnibar.actions.custom import CustomActionRegistry
from omnibar.actions.dispatcher import Dispatcher
from omnibar.actions.executors import MeetingController, SystemController
from omnibar.search.aggregator import Aggregator
from omnibar.search.provider import Provider, ProviderRegistry
from omnibar.search.providers import (
    AppEntry,
    ApplicationProvider,
    CalculatorProvider,
    CommandProvider,
    EmojiProvider,
    FileProvider,
    SystemActionProvider,
    WebSearchProvider,
)
from omnibar.search.ranker import Ranker
from omnibar.search.session import QuerySession, ResultListener
from omnibar.services.frecency import FrecencyService


@dataclass
class Palette:
    registry: ProviderRegistry
    session: QuerySession
    dispatcher: Dispatcher

    def close(self) -> None:
        self.session.close()


def create_palette(
    settings: Optional[Dict[str, Any]] = None,
    catalog: Optional[Callable[[], list[AppEntry]]] = None,
    listener: Optional[ResultListener] = None,
    extra_providers: Iterable[Provider] = (),
    system: Optional[SystemController] = None,
    meetings: Optional[MeetingController] = None,
    frecency: Optional[FrecencyService] = None,
    commands_path: Optional[Path | str] = None,
) -> Palette:
    """
    Build a ready-to-use palette.

    Args:
        settings: Merged settings dict; loaded from disk when omitted
        catalog: Installed application source; no app search without it
        listener: Presentation collaborator receiving results and prompts
        extra_providers: Host providers (calendar, clipboard history, ...)
        system: Desktop effects; defaults to SystemExecutor
        meetings: Meeting assistant hooks
        frecency: Usage tracking shared by app search and dispatcher
        commands_path: commands.toml location; [commands] path when omitted

    Returns:
        Palette with a frozen provider registry
    """
    settings = settings or config.load_settings()
    listener = listener or ResultListener()
    custom = CustomActionRegistry()

    registry = ProviderRegistry()
    if catalog is not None:
        registry.register(ApplicationProvider(
            catalog,
            frecency=frecency,
            max_results=settings["search"]["max_results"],
            fuzzy_threshold=settings["search"]["fuzzy_threshold"],
        ))
    registry.register(FileProvider(
        settings["files"]["roots"],
        max_depth=settings["files"]["max_depth"],
        max_results=settings["files"]["max_results"],
    ))
    registry.register(SystemActionProvider())
    registry.register(CalculatorProvider())
    registry.register(WebSearchProvider(min_query_length=settings["web_search"]["min_query_length"]))
    registry.register(EmojiProvider())
    commands_path = Path(commands_path or settings["commands"]["path"]).expanduser()
    registry.register(CommandProvider.from_file(custom, commands_path))
    for provider in extra_providers:
        registry.register(provider)
    registry.freeze()

    timeout, timeouts = config.provider_timeouts(settings)
    aggregator = Aggregator(
        registry,
        ranker=Ranker(config.ranking_config(settings)),
        timeout=timeout,
        timeouts=timeouts,
        max_workers=settings["aggregator"]["max_workers"],
    )
    session = QuerySession(aggregator, listener)

    dispatcher = Dispatcher(
        system=system,
        meetings=meetings,
        custom=custom,
        search=session.submit,
        listener=listener,
        frecency=frecency,
        confirmation_ttl=config.confirmation_ttl(settings),
    )
    return Palette(registry=registry, session=session, dispatcher=dispatcher)
