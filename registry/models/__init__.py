from .user import Role, User  # noqa: F401
from .pastor import Pastor  # noqa: F401
from .church import Church, church_assistant_pastors  # noqa: F401
from .member import Member, MemberAudit  # noqa: F401
from .family_relationship import FamilyRelationship  # noqa: F401
