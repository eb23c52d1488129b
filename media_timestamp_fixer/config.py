"""
Configuration constants for the media timestamp fixer.
"""
import re
from datetime import timedelta

# --- File Type Definitions ---
JPEG_EXTS = {'.jpg', '.jpeg', '.jpe', '.gif', '.png', '.webp'}
HEIF_EXTS = {'.heic', '.heif'}
RAW_EXTS = {'.cr2', '.cr3', '.nef', '.arw', '.orf', '.rw2', '.dng'}
VIDEO_EXTS = {'.mp4', '.mov', '.m4v', '.avi', '.mts', '.m2ts', '.3gp', '.mpg', '.mpeg'}
AUDIO_EXTS = {'.opus', '.m4a', '.aac', '.mp3', '.ogg', '.amr'}

IMAGE_EXTS = JPEG_EXTS | HEIF_EXTS | RAW_EXTS
MEDIA_EXTS = IMAGE_EXTS | VIDEO_EXTS | AUDIO_EXTS

# --- Filename Evidence ---
# WhatsApp style: IMG-20240115-WA0001.jpg, VID-20240115-WA0012.mp4
FILENAME_PATTERN = re.compile(
    r'^[A-Za-z]{3}-(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})-WA(?P<seq>\d{4})\.[^.]+$',
    re.ASCII
)
# The sequence number is a per-day ordinal, mapped onto minutes after this time.
DUMMY_TIME_BASE = timedelta(hours=10)

# --- Metadata Properties ---
CAPTURE_DATE = 'capture_date'
MEDIA_CREATED = 'media_created'

# Lookup order: the first property yielding a parseable date wins.
METADATA_PRIORITY = [CAPTURE_DATE, MEDIA_CREATED]

# Windows Shell column indices (Windows 10/11)
SHELL_PROPERTY_INDICES = {
    CAPTURE_DATE: 12,    # "Date taken"
    MEDIA_CREATED: 208,  # "Media created"
}
# Range scanned by the --debug-metadata-indices diagnostic
SHELL_INDEX_SCAN_RANGE = range(0, 320)

# Shell values carry locale decorations and invisible direction marks.
# Anything outside this set is dropped before parsing.
METADATA_NOISE = re.compile(r'[^0-9\s.:]')

SHELL_DATE_PATTERN = '%d.%m.%Y %H:%M'
SHELL_DATE_SHAPE = r'\d{2}\.\d{2}\.\d{4} \d{2}:\d{2}'

# exifread / pymediainfo sources for the cross-platform provider
EXIF_DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'EXIF DateTimeDigitized',
    'Image DateTime',
]
EXIF_DATE_PATTERN = '%Y:%m:%d %H:%M:%S'
EXIF_DATE_SHAPE = r'\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2}'

MEDIAINFO_DATE_FIELDS = [
    'recorded_date',
    'encoded_date',
    'tagged_date',
]
# "UTC 2024-01-15 14:22:05" loses its letters and dashes when cleaned
MEDIAINFO_DATE_PATTERN = '%Y%m%d %H:%M:%S'
MEDIAINFO_DATE_SHAPE = r'\d{8} \d{2}:\d{2}:\d{2}'

# --- Reporting ---
TIMESTAMP_DISPLAY_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
