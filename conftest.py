try:
    from pytest_astropy_header.display import PYTEST_HEADER_MODULES, TESTED_VERSIONS
except ImportError:
    TESTED_VERSIONS = {}
    PYTEST_HEADER_MODULES = {}

try:
    from zoomview import __version__ as version
except ImportError:
    version = 'unknown'

# Only numpy matters here; drop the astronomy packages the header
# lists by default.
PYTEST_HEADER_MODULES.clear()
PYTEST_HEADER_MODULES['Numpy'] = 'numpy'

TESTED_VERSIONS['zoomview'] = version
