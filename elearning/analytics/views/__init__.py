from .instructor_views import *
