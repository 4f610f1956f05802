"""Allow running the exporter with ``python -m instance_health_exporter``."""

from instance_health_exporter.main import run

if __name__ == "__main__":
    run()
