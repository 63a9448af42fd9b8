import logging
from pathlib import Path

from .config import (
    BACKGROUND_TASKS_ENABLED,
    CODES_FILE,
    DATA_DIR,
    FIT_DIR,
    GEOFENCE_RADIUS_KM,
    HTTP_HOST,
    HTTP_PORT,
    IMAGE_SCAN_INTERVAL_SECONDS,
    IMAGES_DIR,
    LIVE_FEED_INTERVAL_SECONDS,
    LOG_LEVEL,
    TRACKING_TOKEN_FILE,
)
from .services import (
    ImageScanner,
    LiveFeedConfig,
    LiveFeedIntegrator,
    Supervisor,
    TrackMerger,
    TrackMergerConfig,
)
from .state import AppState
from .web import create_app


def _setup_logging() -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=getattr(logging, LOG_LEVEL, logging.INFO),
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _ensure_directories() -> None:
    for directory in (DATA_DIR, FIT_DIR):
        Path(directory).mkdir(parents=True, exist_ok=True)


def build_state() -> tuple[AppState, ImageScanner, LiveFeedIntegrator]:
    """Run the startup merge and the first image scan."""

    state = AppState()
    TrackMerger(TrackMergerConfig.from_directories(DATA_DIR, FIT_DIR)).load(state.track)

    scanner = ImageScanner(IMAGES_DIR)
    scanner.refresh(state.images)

    integrator = LiveFeedIntegrator(
        state,
        LiveFeedConfig.from_files(
            token_file=TRACKING_TOKEN_FILE, codes_file=CODES_FILE, data_dir=DATA_DIR
        ),
    )
    integrator.refresh_access_codes()
    return state, scanner, integrator


def build_supervisor(
    state: AppState, scanner: ImageScanner, integrator: LiveFeedIntegrator
) -> Supervisor:
    supervisor = Supervisor()
    supervisor.add(
        "image-scan", IMAGE_SCAN_INTERVAL_SECONDS, lambda: scanner.refresh(state.images)
    )
    supervisor.add("live-feed", LIVE_FEED_INTERVAL_SECONDS, integrator.tick)
    return supervisor


def main() -> None:
    _setup_logging()
    _ensure_directories()

    state, scanner, integrator = build_state()
    supervisor = build_supervisor(state, scanner, integrator)
    if BACKGROUND_TASKS_ENABLED:
        supervisor.start()
    else:
        logging.info("Background tasks disabled; serving archived data only")

    app = create_app(state, images_dir=IMAGES_DIR, radius_km=GEOFENCE_RADIUS_KM)
    logging.info("Server starting on %s:%s", HTTP_HOST, HTTP_PORT)
    try:
        app.run(host=HTTP_HOST, port=HTTP_PORT, threaded=True)
    finally:
        supervisor.stop(timeout=1.0)
