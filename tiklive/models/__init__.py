from .user import User, UserProfile, AdminPermission
from .influencer import Influencer
from .company import Company
from .task import Task, TaskCategory
from .application import TaskApplication
from .video import Video, VideoCategory
from .admin import AdminLog, SystemStats
from .verification import VerificationCode
