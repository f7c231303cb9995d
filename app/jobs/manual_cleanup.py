"""密码重置令牌清理本地执行脚本

与 Celery beat 中的 cleanup_expired_password_resets 任务逻辑一致，
用于 worker 未运行时手工清理：

    python -m app.jobs.manual_cleanup --dry-run
    python -m app.jobs.manual_cleanup --batch-size 1000
"""

import argparse
import logging
from app.db.session import SessionLocal
from app.services.account_service import AccountService

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_cleanup(batch_size: int = 500, dry_run: bool = False) -> int:
    """清理已使用或已过期的重置令牌，dry_run 时只统计数量"""
    db = SessionLocal()
    try:
        service = AccountService(db)
        if dry_run:
            pending = service.count_stale_resets()
            logger.info(f"试运行：{pending} 条重置令牌待清理")
            return pending

        cleaned = service.cleanup_expired_resets(batch_size)
        db.commit()
        logger.info(f"清理完成：删除 {cleaned} 条重置令牌")
        return cleaned
    except Exception as e:
        logger.error(f"清理执行失败: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='过期密码重置令牌清理工具')
    parser.add_argument('--batch-size', type=int, default=500, help='每批删除条数 (默认: 500)')
    parser.add_argument('--dry-run', action='store_true', help='只统计，不删除')
    parser.add_argument('--verbose', action='store_true', help='输出 DEBUG 日志')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        count = run_cleanup(args.batch_size, args.dry_run)
    except Exception as e:
        print(f"❌ 执行失败: {str(e)}")
        return 1

    if args.dry_run:
        print(f"📊 试运行结果：发现 {count} 条过期令牌")
    else:
        print(f"✅ 清理完成：处理了 {count} 条记录")
    return 0


if __name__ == "__main__":
    exit(main())
