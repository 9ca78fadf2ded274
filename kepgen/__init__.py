# kepgen - folder/tag hierarchy editor backend with Kepware CSV export.
# The package holds the data model, the hierarchy controllers and the
# CSV/JSON serializers; front ends (tree views, the command line) only
# call into `controllers`.

from . import config, controllers, errors, models
from .controllers import AppController, Hierarchy
from .models import TagDataType

__version__ = "1.0.0"

__all__ = ["config", "controllers", "errors", "models", "AppController", "Hierarchy", "TagDataType"]
