from dotenv import load_dotenv


from fastapi import FastAPI

from app.api.api_v1 import router as api_v1
from app.core.lifespan import lifespan

load_dotenv()  # Load .env variables into os.environ for libraries (OpenAI, LangSmith, etc.)


app = FastAPI(lifespan=lifespan)


@app.get("/")
def root():
    return {"message": "Hello from deploy-checklist-bot!"}


app.include_router(api_v1)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
