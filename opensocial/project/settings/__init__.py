"""
Settings for opensocial.

This loads the defaults and then the development overrides if
``OPENSOCIAL_DEBUG`` is set in the environment.
"""

import os

from opensocial.project.settings.defaults import *  # noqa: F401, F403

if os.environ.get("OPENSOCIAL_DEBUG", "0") != "0":
    from opensocial.project.settings.development import *  # noqa: F401, F403
