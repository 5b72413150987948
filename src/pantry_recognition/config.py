import os

# -----------------------------------
# Detector thresholds
# -----------------------------------

# Object/label classifier results must be strictly above this to be admitted.
OBJECT_CONFIDENCE_THRESHOLD = float(os.getenv("PANTRY_OBJECT_CONFIDENCE_THRESHOLD", "0.5"))

# OCR lines must be strictly above this to be scanned for food keywords.
TEXT_CONFIDENCE_THRESHOLD = float(os.getenv("PANTRY_TEXT_CONFIDENCE_THRESHOLD", "0.3"))

# -----------------------------------
# Classifier model
# -----------------------------------

# ultralytics classification weights, downloaded on first use if missing
CLASSIFIER_MODEL = os.getenv("PANTRY_CLASSIFIER_MODEL", "yolov8n-cls.pt")

# "cpu" or "cuda"
DEVICE = os.getenv("PANTRY_DEVICE", "cpu")

# Class probabilities below this are not reported by the classifier at all
CLASSIFIER_MIN_SCORE = float(os.getenv("PANTRY_CLASSIFIER_MIN_SCORE", "0.01"))

# -----------------------------------
# Logging
# -----------------------------------

LOG_LEVEL = os.getenv("PANTRY_LOG_LEVEL", "INFO").upper()
