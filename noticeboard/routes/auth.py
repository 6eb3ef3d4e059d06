from fastapi import APIRouter, HTTPException, Depends, status
import hmac
import logging
from noticeboard.models.admin import AdminLogin, AdminLoginResponse, AdminRegister, AdminResponse
from noticeboard.utils.auth import hash_password, verify_password, create_access_token, get_current_admin
from noticeboard.database.db_operations import db_ops
from noticeboard.config.database import Collections
from noticeboard.config.settings import settings
from noticeboard.utils.helpers import serialize_doc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

@router.post("/login", response_model=AdminLoginResponse)
async def admin_login(credentials: AdminLogin):
    """
    Authenticate admin user and return JWT token
    """
    admin = await db_ops.get_one(Collections.ADMINS, {"username": credentials.username})
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin not found"
        )

    if not verify_password(credentials.password, admin["password"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Wrong password"
        )

    token = create_access_token(data={
        "sub": str(admin["_id"]),
        "username": admin["username"],
    })
    logger.info("🔑 Admin %s logged in", admin["username"])
    return AdminLoginResponse(token=token, username=admin["username"])

@router.post("/register", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
async def register_admin(data: AdminRegister):
    """
    Create an admin account; requires the deployment's master key
    """
    if not hmac.compare_digest(data.masterKey.encode("utf-8"), settings.MASTER_KEY.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid master key"
        )

    existing_admin = await db_ops.get_one(Collections.ADMINS, {"username": data.username})
    if existing_admin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already exists"
        )

    created_admin = await db_ops.create(Collections.ADMINS, {
        "username": data.username,
        "password": hash_password(data.password),
    })
    logger.info("✅ Admin %s registered", data.username)
    return serialize_doc({
        "_id": created_admin["_id"],
        "username": created_admin["username"],
        "created_at": created_admin["created_at"],
    })

@router.get("/me", response_model=AdminResponse)
async def get_me(current_admin: dict = Depends(get_current_admin)):
    """
    Get current authenticated admin information
    """
    admin = await db_ops.get_by_id(Collections.ADMINS, current_admin["sub"])
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin not found"
        )
    return serialize_doc({
        "_id": admin["_id"],
        "username": admin["username"],
        "created_at": admin.get("created_at"),
    })
