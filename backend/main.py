import os # os needs to be imported before dotenv for getenv to work as expected in some cases
from dotenv import load_dotenv
load_dotenv() # Load .env file at the very beginning

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from roster.config import Settings, get_settings
from roster.context import RosterContext
from roster.routes import auth, dashboard, users, skills, team, me, health, live
from roster.middleware.error_handler import ErrorHandlerMiddleware
import logging

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def create_app(settings: Settings = None, store=None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Team Roster API",
        description="Role-based roster of users, skills, service requests and vacations",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    @app.on_event("startup")
    async def startup_event():
        """Open the store subscriptions and token housekeeping"""
        app.state.roster = RosterContext(settings, store)
        await app.state.roster.init()
        logging.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Close subscriptions and the store client"""
        await app.state.roster.teardown()
        logging.info("Application shutdown completed")

    # An explicit origin list is mandatory when allow_credentials=True
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add error handler middleware (after CORS so errors get CORS headers)
    app.add_middleware(ErrorHandlerMiddleware)

    app.include_router(health.router, tags=["Health"])
    app.include_router(live.router, tags=["Live"])

    @app.get("/")
    async def root():
        return {
            "message": "Welcome to Team Roster API",
            "docs": "/docs",
            "health": "/health"
        }

    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(dashboard.router, prefix="/api", tags=["Dashboard"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(skills.router, prefix="/api/skills", tags=["Skills"])
    app.include_router(team.router, prefix="/api/team", tags=["Team"])
    app.include_router(me.router, prefix="/api/me", tags=["Profile"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
