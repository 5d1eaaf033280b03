from .url_source import load_locations
from .results_writer import save_results

__all__ = ["load_locations", "save_results"]
