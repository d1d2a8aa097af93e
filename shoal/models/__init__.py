# Import all models so Base.metadata is populated before create_all.
from shoal.models.session import Session  # noqa: F401
from shoal.models.fish import Fish  # noqa: F401
