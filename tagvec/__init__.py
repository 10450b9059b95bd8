"""tagvec - weighted tag vectors with cosine-similarity ranking.

Indexes category/value tags as sparse vector dimensions and ranks tagged
items against a query tag-set.
"""

__version__ = "0.1.0"
__author__ = "tagvec Contributors"

from tagvec.config import Settings, get_settings
from tagvec.index import TagVectorIndex

__all__ = ["Settings", "TagVectorIndex", "get_settings", "__version__"]
