from typing import Annotated
from fastapi import Depends
from app.modules.auth.dependencies import get_current_user, require_admin, require_supervisor
from app.modules.auth.models import User

user_dependency = Annotated[User, Depends(get_current_user)]
admin_dependency = Annotated[User, Depends(require_admin())]
supervisor_dependency = Annotated[User, Depends(require_supervisor())]
