from dotenv import load_dotenv
import os
import tempfile

load_dotenv()

# Target chat, required unless passed with --chat-id
CHAT_ID = os.getenv("TELEGOY_CHAT_ID")

# Local telegram-bot-api server lifts the 50MB upload limit
API_URL = os.getenv("TELEGOY_API_URL", "http://localhost:8081")

STATIC_CAPTION_PATH = os.getenv("TELEGOY_STATIC_CAPTION_PATH", "static_caption.txt")

SEND_MODE = os.getenv("TELEGOY_SEND_MODE", "group")
UNKNOWN_FILES = os.getenv("TELEGOY_UNKNOWN_FILES", "skip")
SEND_DELAY = float(os.getenv("TELEGOY_SEND_DELAY", "1.1"))

TEMP_DIR = os.getenv("TELEGOY_TEMP_DIR", tempfile.gettempdir())
LOG_DIR = os.getenv("TELEGOY_LOG_DIR", "other/logs")

FFMPEG_BINARY = os.getenv("TELEGOY_FFMPEG", "ffmpeg")
FFPROBE_BINARY = os.getenv("TELEGOY_FFPROBE", "ffprobe")
TOOL_TIMEOUT = float(os.getenv("TELEGOY_TOOL_TIMEOUT", "60"))
