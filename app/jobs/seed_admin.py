"""创建 / 更新后台管理员账户"""

import argparse
import getpass
import logging
import os

from app.db import init_db
from app.db.session import SessionLocal
from app.services.account_service import AccountService

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def seed_admin(username: str, password: str, role: str = "admin"):
    db = SessionLocal()
    try:
        return AccountService(db).upsert_admin(username, password, role)
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description='后台管理员初始化工具')
    parser.add_argument(
        '--username',
        default=os.getenv("ADMIN_USERNAME", "admin"),
        help='管理员用户名 (默认: $ADMIN_USERNAME 或 admin)'
    )
    parser.add_argument(
        '--password',
        default=os.getenv("ADMIN_PASSWORD"),
        help='管理员密码 (默认: $ADMIN_PASSWORD，未设置时交互输入)'
    )
    parser.add_argument(
        '--role',
        default="admin",
        help='角色 (默认: admin)'
    )
    parser.add_argument(
        '--create-tables',
        action='store_true',
        help='先按模型建表'
    )

    args = parser.parse_args(argv)
    password = args.password or getpass.getpass("Admin password: ")
    if not password:
        print("❌ 密码不能为空")
        return 1

    try:
        if args.create_tables:
            init_db()
        user, created = seed_admin(args.username, password, args.role)
        print(f"✅ 管理员已{'创建' if created else '更新'}: {user.username} ({user.role})")
    except Exception as e:
        print(f"❌ 执行失败: {str(e)}")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
