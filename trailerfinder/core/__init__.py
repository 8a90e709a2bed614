"""Client-side discovery logic: view state, debounce, fetch, scroll, trailers"""

from .controller import DiscoveryController
from .debouncer import QueryDebouncer
from .orchestrator import FetchOrchestrator
from .scroll import InfiniteScrollTrigger
from .sessions import SessionRegistry
from .state import FETCH_ERROR_MESSAGE, FetchStatus, ViewState, ViewStateMachine
from .trailers import TrailerCache, TrailerLookup, TrailerModal, TrailerStatus

__all__ = [
    "DiscoveryController",
    "QueryDebouncer",
    "FetchOrchestrator",
    "InfiniteScrollTrigger",
    "SessionRegistry",
    "FETCH_ERROR_MESSAGE",
    "FetchStatus",
    "ViewState",
    "ViewStateMachine",
    "TrailerCache",
    "TrailerLookup",
    "TrailerModal",
    "TrailerStatus",
]
