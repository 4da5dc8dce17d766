import logging

import uvicorn

from app.config import settings

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    print("=" * 50)
    print(f"🚀 {settings.APP_NAME} API 服务器")
    print("=" * 50)
    print("   • http://127.0.0.1:8000")
    print("   • 文档: http://127.0.0.1:8000/docs")
    print("   • 健康检查: http://127.0.0.1:8000/health")
    print("=" * 50)

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
