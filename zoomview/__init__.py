# Licensed under a 3-clause BSD style license - see LICENSE.txt
"""Pan/zoom interaction controller for an image viewport."""

from .version import version as __version__

__all__ = ['__version__']

# END
