from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from phpcity.routers import analysis

app = FastAPI(
    title="PHP City Server",
    description="API for PHP type extraction and city layouts.",
    version="1.0.0"
)

# Renderers are served from elsewhere during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis.router)

@app.get("/api-status")
async def root():
    return {"message": "PHP City Server is running. Visit /docs for API documentation."}
