"""
Vector-Muse Configuration
Central configuration for providers, projection, perception, and defaults.
"""

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent

# Logging
LOG_LEVEL = "INFO"

# Embedding providers
DEFAULT_PROVIDER = "huggingface"
OPENAI_MODEL = "text-embedding-ada-002"
OPENAI_EMBEDDING_DIM = 1536
HF_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
HF_INFERENCE_URL = "https://router.huggingface.co/hf-inference/models/{model}/pipeline/feature-extraction"
HF_EMBEDDING_DIM = 384
PROVIDER_TIMEOUT_SECONDS = 30.0

PROVIDERS = {
    "huggingface": {
        "label": "🤗 Hugging Face",
        "env_key": "HF_API_KEY",
        "dimension": HF_EMBEDDING_DIM,
    },
    "openai": {
        "label": "🧠 OpenAI",
        "env_key": "OPENAI_API_KEY",
        "dimension": OPENAI_EMBEDDING_DIM,
    },
}

# PCA settings
PCA_N_COMPONENTS = 3
EIGEN_TOLERANCE = 1e-10  # Scaled by max(1, largest eigenvalue)

# Batches above this size block the UI for too long when projected inline
MAX_SYNC_BATCH = 50

# Perceptual mapping (fixed contract, audio code depends on these)
FREQ_BASE_HZ = 220.0
FREQ_SPAN_HZ = 660.0
GAIN_BASE = 0.5
GAIN_SLOPE = 0.4
SEED_FREQ_SPAN_HZ = 440.0
SEED_GAIN = 0.2

# Audio
AUDIO_SAMPLE_RATE = 22050
TONE_PREVIEW_SECONDS = 0.6

# Landscape canvas
CANVAS_WIDTH = 700
CANVAS_HEIGHT = 400
NODE_RADIUS = 36
LAYOUT_RADIUS_RATIO = 0.35

# Visualization settings
PLOT_HEIGHT = 500
PLOT_WIDTH = 800

# Similar-word results shown by the analogy machine
DEFAULT_K_SIMILAR = 10

# Context morphing limits
MAX_ADJECTIVE_VARIATIONS = 5
MAX_VARIATIONS = 10
WORD_PLACEHOLDER = "[WORD]"

DEFAULT_WORDS = [
    "love", "ocean", "fire", "wisdom", "melody",
    "silence", "dream", "infinity", "tranquility", "storm",
    "whisper", "cosmos", "harmony", "shadow", "dawn",
]

DEFAULT_ANALOGY = {
    "positives": ["king", "woman"],
    "negatives": ["man"],
}

POETIC_WORD_LIST = [
    "love", "beauty", "heart", "soul", "dream", "whisper",
    "eternity", "memory", "shadow", "light", "darkness", "silence",
    "voice", "spirit", "nature", "ocean", "sky", "moon", "sun",
    "star", "flower", "wind", "storm", "peace", "passion", "desire",
    "longing", "sorrow", "joy", "hope", "faith", "truth", "grace",
    "freedom", "wisdom", "time", "death", "life", "birth", "infinity",
    "mystery", "reflection", "journey", "paradise", "flame", "ice",
    "dance", "song", "poetry", "music", "harmony", "melody", "rhythm",
    "echo", "universe", "celestial", "terrestrial", "eternal", "ephemeral",
    "divine", "mortal", "sacred", "profane", "innocence", "experience",
]

DEFAULT_CONTEXTS = [
    "The [WORD] is deep and meaningful.",
    "She felt a sense of [WORD] in her heart.",
    "The sky reflects a perfect [WORD].",
    "His poem contained elements of [WORD].",
    "Ancient philosophers discussed [WORD] at length.",
    "The artist expressed [WORD] through colors.",
    "In modern society, [WORD] has changed meaning.",
    "Children often understand [WORD] intuitively.",
]

DEFAULT_MORPH_SENTENCE = "The poet explored the vast ocean of creativity."
DEFAULT_MORPH_TARGET = "ocean"

ADJECTIVE_SWAPS = [
    "vast", "deep", "boundless", "infinite", "mysterious",
    "calm", "turbulent", "serene", "dark", "bright",
]

VERB_SWAPS = [
    "explored", "discovered", "navigated", "entered", "traversed",
    "observed", "witnessed", "experienced", "contemplated", "understood",
]
