import os
from dotenv import load_dotenv

load_dotenv()

# MongoDB配置
MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "daily_protocol")

# 存储后端: mongo 或 snapshot (本地JSON快照)
STORE_BACKEND = os.getenv("STORE_BACKEND", "mongo")
SNAPSHOT_DIR = os.getenv("SNAPSHOT_DIR", ".protocol_snapshots")

# 身份认证服务配置
AUTH_URL = os.getenv("AUTH_URL", "http://localhost:54321")
AUTH_API_KEY = os.getenv("AUTH_API_KEY", "your_anon_key_here")
# 身份服务拒绝时是否签发开发用的模拟身份 (生产环境请关闭)
AUTH_DEV_FALLBACK = os.getenv("AUTH_DEV_FALLBACK", "true").lower() == "true"

# JWT配置
JWT_SECRET = os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_HOURS = 24 * 7  # 7天过期

# 日志配置
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None

# 服务器配置
API_PREFIX = "/api"
