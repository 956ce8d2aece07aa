"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) in the ``cardball.plugins`` group.
INVARIANT: Notification hook failures are warnings, never errors.
"""

from cardball.plugins.hookspecs import hookimpl
from cardball.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
