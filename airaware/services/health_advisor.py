"""Health advisor turning conditions into advice."""

from airaware.schemas.environment import Advisory, AqiBand, Conditions

# Inclusive upper bounds; anything above the last one is hazardous
BAND_LIMITS = (
    (50, AqiBand.GOOD),
    (100, AqiBand.MODERATE),
    (200, AqiBand.UNHEALTHY),
)


def classify_aqi(aqi: int) -> AqiBand:
    """Return the advisory band for an AQI value."""
    for upper, band in BAND_LIMITS:
        if aqi <= upper:
            return band
    return AqiBand.HAZARDOUS


class HealthAdvisor:
    """Stateless advisor mapping conditions to a health advisory."""

    def analyze(self, conditions: Conditions) -> Advisory:
        """
        Build the advisory for the given conditions.

        Args:
            conditions: Merged weather and air quality readings

        Returns:
            Advisory with its band and explanatory text
        """
        band = classify_aqi(conditions.aqi)

        if band is AqiBand.GOOD:
            text = (
                "Currently, the air is pristine. It's a great time to open windows or go for "
                f"a run. The temperature is {conditions.temperature_c}°C, making it "
                "comfortable. Enjoy the fresh air!"
            )
        elif band is AqiBand.MODERATE:
            text = (
                "Air quality is acceptable. However, if you are unusually sensitive to "
                "pollution, consider limiting prolonged outdoor exertion. "
                f"It's {conditions.weather_label} outside."
            )
        elif band is AqiBand.UNHEALTHY:
            text = (
                "Alert: Unhealthy air quality detected. Everyone may begin to experience "
                "health effects. Active children and adults should avoid prolonged outdoor "
                "exertion. Wear a mask if necessary."
            )
        else:
            text = (
                "CRITICAL WARNING: Hazardous conditions! Avoid all physical activity outdoors. "
                "Keep windows closed. Run an air purifier if available. "
                f"Visibility is low due to {conditions.weather_label}."
            )

        return Advisory(band=band, text=text)
