from fastapi import APIRouter, HTTPException, Header
from pydantic import BaseModel
from datetime import datetime, timedelta
from jose import JWTError, jwt
from loguru import logger
import hashlib
import httpx

from config import AUTH_URL, AUTH_API_KEY, AUTH_DEV_FALLBACK, JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRE_HOURS

router = APIRouter(prefix="/auth", tags=["认证"])


class LoginRequest(BaseModel):
    access_token: str


class LoginResponse(BaseModel):
    token: str
    user_id: str


def create_token(user_id: str) -> str:
    expire = datetime.utcnow() + timedelta(hours=JWT_EXPIRE_HOURS)
    payload = {
        "user_id": user_id,
        "exp": expire
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> str:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Token无效或已过期")
    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token中缺少用户身份")
    return user_id


def get_user_id(authorization: str = Header(...)) -> str:
    """从Header获取用户ID, 没有身份时拒绝所有操作"""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="无效的Authorization头")
    token = authorization[7:]
    return verify_token(token)


async def resolve_owner(access_token: str) -> str:
    """向身份服务查询访问令牌对应的用户ID"""
    url = f"{AUTH_URL.rstrip('/')}/auth/v1/user"
    headers = {
        "apikey": AUTH_API_KEY,
        "Authorization": f"Bearer {access_token}",
    }

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.warning(f"Identity provider unreachable: {e}")
        response = None

    if response is not None and response.status_code == 200:
        user_id = response.json().get("id")
        if user_id:
            return user_id

    if not AUTH_DEV_FALLBACK:
        raise HTTPException(status_code=401, detail="身份验证失败")

    # 开发环境: 身份服务不可用或拒绝时, 用令牌摘要生成模拟用户ID
    digest = hashlib.sha256(access_token.encode("utf-8")).hexdigest()[:16]
    logger.warning("Identity provider rejected token, issuing dev owner id")
    return f"dev_{digest}"


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """用身份服务的访问令牌换取本服务的token"""
    user_id = await resolve_owner(request.access_token)
    token = create_token(user_id)

    return LoginResponse(
        token=token,
        user_id=user_id
    )
