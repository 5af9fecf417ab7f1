"""unidir - University Directory API.

CRUD endpoints for universities, courses, language-test scores and
admission requirements, guarded by token authentication.
"""

from unidir.version import __version__

__all__ = ["__version__"]
