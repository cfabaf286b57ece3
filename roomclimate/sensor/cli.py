from __future__ import annotations

import signal
import threading
from datetime import timedelta
from typing import Optional

import typer

from roomclimate.core.config import load_agent_settings
from roomclimate.core.logging import configure_logging
from roomclimate.sensor.agent import SensorAgent
from roomclimate.sensor.reader import SimulatedSensorReader
from roomclimate.sensor.transport import IngestClient

app = typer.Typer(
    help="Sensor agent: samples, averages and forwards indoor readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.command()
def run(
    api_url: Optional[str] = typer.Option(
        None, "--api-url", "-u", help="API base URL (defaults to SENSOR_API_URL)."
    ),
    iterations: Optional[int] = typer.Option(
        None, "--iterations", "-n", min=1, help="Stop after this many samples."
    ),
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", min=0.1, help="Seconds between samples."
    ),
) -> None:
    """Run the sampling loop until interrupted."""
    settings = load_agent_settings()
    configure_logging(settings.log_level)

    reader = SimulatedSensorReader(
        temperature=settings.simulated_temperature,
        humidity=settings.simulated_humidity,
        fault_rate=settings.simulated_fault_rate,
    )
    transmitter = IngestClient(
        base_url=api_url or str(settings.api_url),
        timeout_seconds=settings.timeout_seconds,
    )
    agent = SensorAgent(
        reader=reader,
        transmitter=transmitter,
        window_size=settings.window_size,
        temperature_threshold=settings.temperature_threshold,
        humidity_threshold=settings.humidity_threshold,
        force_interval=timedelta(seconds=settings.force_interval_seconds),
    )

    stop_event = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop_event.set())
    signal.signal(signal.SIGTERM, lambda *_: stop_event.set())
    try:
        count = agent.run(
            interval_seconds=interval or settings.sample_interval_seconds,
            stop_event=stop_event,
            max_iterations=iterations,
        )
    finally:
        transmitter.close()
    typer.echo(f"Collected {count} samples.")


@app.command()
def config() -> None:
    """Print the effective agent configuration."""
    settings = load_agent_settings()
    for key, value in settings.model_dump().items():
        typer.echo(f"{key}={value}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
