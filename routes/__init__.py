from .auth import router as auth_router
from .users import router as users_router
from .tournaments import router as tournaments_router
from .wallet import router as wallet_router
from .support import router as support_router
from .admin import router as admin_router

routers = [auth_router, users_router, tournaments_router, wallet_router, support_router, admin_router]
