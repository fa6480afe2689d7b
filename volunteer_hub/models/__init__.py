from volunteer_hub.models.user import User, UserSession
from volunteer_hub.models.job import Job
from volunteer_hub.models.application import JobApplication
from volunteer_hub.models.log import PartnershipLog, ActivityLog
from volunteer_hub.models.zipcode import ZipcodeCoordinate
from volunteer_hub.models.category import JobCategory
from volunteer_hub.models.volunteer import VolunteerRegistration

__all__ = [
    "User", "UserSession", "Job", "JobApplication", "PartnershipLog",
    "ActivityLog", "ZipcodeCoordinate", "JobCategory", "VolunteerRegistration",
]
