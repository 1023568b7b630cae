"""Value sets shared by the ORM models and the API schemas."""
import enum

from sqlalchemy import Enum


def db_enum(enum_cls):
    """Column type persisting the enum *values* (some values are not valid identifiers)."""
    return Enum(enum_cls, name=enum_cls.__name__.lower(), values_callable=lambda e: [m.value for m in e])


class RoleEnum(str, enum.Enum):
    user = "user"
    organizer = "organizer"
    admin = "admin"


class OrganizationType(str, enum.Enum):
    school = "school"
    ngo = "ngo"
    community = "community"


class UserSubtype(str, enum.Enum):
    student = "student"
    parent = "parent"


class Grade(str, enum.Enum):
    grade_9 = "9"
    grade_10 = "10"
    grade_11 = "11"
    grade_12 = "12"


class CommunicationChannel(str, enum.Enum):
    whatsapp = "whatsapp"
    email = "email"


class EventCategory(str, enum.Enum):
    academic_tech = "academic_tech"
    leadership_literary = "leadership_literary"
    sports_fitness = "sports_fitness"
    creative_arts = "creative_arts"


class EventMode(str, enum.Enum):
    online = "online"
    offline = "offline"
    hybrid = "hybrid"


class MediaType(str, enum.Enum):
    image = "image"
    video = "video"


class SubjectExpertise(str, enum.Enum):
    mathematics = "Mathematics"
    science = "Science"
    arts = "Arts"
    sports_coach = "Sports Coach"
    admin = "Admin"
    na = "NA"


class ExperienceLevel(str, enum.Enum):
    fresher = "Fresher"
    one_to_three_years = "1-3 Years"
    five_plus_years = "5+ Years"
    na = "NA"


class JobType(str, enum.Enum):
    full_time = "Full-Time"
    part_time = "Part-Time"
    visiting_faculty = "Visiting Faculty"
    na = "NA"


class EntryType(str, enum.Enum):
    individual = "Individual"
    team_based = "Team-based"


class ParticipantRole(str, enum.Enum):
    participant = "participant"
    volunteer = "volunteer"
    attendee = "attendee"


class TShirtSize(str, enum.Enum):
    xs = "XS"
    s = "S"
    m = "M"
    l = "L"
    xl = "XL"
    xxl = "XXL"
    na = "NA"


class AdCategory(str, enum.Enum):
    school_admission = "School Admission"
    teacher_hiring = "Teacher Hiring"
    brand_event = "Brand Event"


class AnnouncementCategory(str, enum.Enum):
    general = "general"
    feature = "feature"
    update = "update"
    event = "event"
    deadline = "deadline"


class AnnouncementPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
