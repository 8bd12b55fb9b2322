import uvicorn
from dotenv import load_dotenv

load_dotenv()

from server import server  # noqa: E402

server_app = server.handler


if __name__ == "__main__":
    uvicorn.run("main:server_app", host="0.0.0.0", port=8000)
