from .student_views import *
