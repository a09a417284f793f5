from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import select
from app.api.deps import db, current_user, authorizer
from app.db.session import atomic
from app.schemas.user import UserCreate, UserOut, RoleGrantIn
from app.models.user import User
from app.core.security import hash_password
from app.services.authz import OWNER, ROLES, RoleAuthorizer

router = APIRouter(prefix="/users", tags=["users"])

def _user_out(authz: RoleAuthorizer, user: User) -> UserOut:
    return UserOut(id=user.id, username=user.username, roles=authz.roles_of(user.username), created_at=user.created_at)

@router.get("", response_model=list[UserOut])
def list_users(s: Session = Depends(db), u: str = Depends(current_user), authz: RoleAuthorizer = Depends(authorizer)):
    authz.require(u, OWNER)
    users = s.execute(select(User).order_by(User.username.asc())).scalars().all()
    return [_user_out(authz, x) for x in users]

@router.post("", response_model=UserOut)
def create_user(
    body: UserCreate,
    s: Session = Depends(db),
    u: str = Depends(current_user),
    authz: RoleAuthorizer = Depends(authorizer),
):
    authz.require(u, OWNER)
    exists = s.execute(select(User).where(User.username == body.username)).scalar_one_or_none()
    if exists:
        raise HTTPException(status_code=409, detail="user_exists")
    with atomic(s):
        user = User(username=body.username, password_hash=hash_password(body.password))
        s.add(user)
    s.refresh(user)
    return _user_out(authz, user)

@router.post("/{username}/roles", response_model=UserOut)
def grant_role(
    username: str,
    body: RoleGrantIn,
    s: Session = Depends(db),
    u: str = Depends(current_user),
    authz: RoleAuthorizer = Depends(authorizer),
):
    authz.require(u, OWNER)
    user = s.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="user_not_found")
    with atomic(s):
        authz.grant(username, body.role)
    return _user_out(authz, user)

@router.delete("/{username}/roles/{role}")
def revoke_role(
    username: str,
    role: str,
    s: Session = Depends(db),
    u: str = Depends(current_user),
    authz: RoleAuthorizer = Depends(authorizer),
):
    authz.require(u, OWNER)
    if role not in ROLES:
        raise HTTPException(status_code=400, detail="role_invalid")
    if role == OWNER and username == u:
        raise HTTPException(status_code=409, detail="cannot_revoke_own_owner_role")
    with atomic(s):
        removed = authz.revoke(username, role)
    if not removed:
        raise HTTPException(status_code=404, detail="grant_not_found")
    return {"ok": True}
