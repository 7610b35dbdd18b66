from .authoring_views import *
