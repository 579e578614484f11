from .documents import SENTENCE, make_soup, prose
from .metric_delta import get_histogram_count, histogram_observes, metric_delta

__all__ = ["SENTENCE", "get_histogram_count", "histogram_observes", "make_soup", "metric_delta", "prose"]
