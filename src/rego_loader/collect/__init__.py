"""Policy source collection (filesystem and HTTP).

These produce the path -> contents mapping consumed by rego_loader.loader.
"""

from rego_loader.collect.files import collect_files
from rego_loader.collect.remote import fetch_remote_files

__all__ = [
    "collect_files",
    "fetch_remote_files",
]
