"""Configuration for the video generation flow."""

STATE_WAIT_KEY = "video:wait_key"
STATE_WAIT_PROMPT = "video:wait_prompt"

PHASE_IDLE = "idle"
PHASE_RUNNING = "running"

# Fixed delay between two status checks of a running Veo operation.
POLL_INTERVAL = 10.0

VIDEO_FILENAME = "generated-video.mp4"
VIDEO_MIME_TYPE = "video/mp4"

SAMPLE_PROMPT = (
    "a cinematic shot of a labrador retriever from FPV perspective, running down "
    "the road to the sunset. 5 second shot at maximum"
)
