from .auth import router as auth_router
from .progress import router as progress_router
from .journey import router as journey_router
