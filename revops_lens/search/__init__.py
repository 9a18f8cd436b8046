from .debounce import Debouncer, LatestRequestGate, GlobalSearch

__all__ = ["Debouncer", "LatestRequestGate", "GlobalSearch"]
