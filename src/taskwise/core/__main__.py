"""CLI 入口模块 -- python -m taskwise.core <command>

支持的命令：
  init-db   创建数据库表与索引（幂等）
"""

import asyncio
import sys

from .config import get_db_path


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m taskwise.core <command>")
        print("命令:")
        print("  init-db   创建数据库表与索引")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(initialize_database())
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db")
        sys.exit(1)


async def initialize_database() -> None:
    """执行数据库初始化"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        cursor = await store_group.conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        )
        tables = [row[0] for row in await cursor.fetchall()]
        print(f"初始化完成，数据表: {', '.join(tables)}")
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
