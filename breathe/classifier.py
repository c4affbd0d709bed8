# ===================== AQI CATEGORIES & HEALTH ADVICE =====================
# US EPA bands on the 0-500 scale. Upper bounds are inclusive; values below 0
# fall into the first band and values above 500 into the last.

from .models import AQICategory, HealthAdvice

CATEGORIES = (
    AQICategory(
        "Good",
        "Air quality is satisfactory, and air pollution poses little or no risk.",
        "air-good",
    ),
    AQICategory(
        "Moderate",
        "Air quality is acceptable. However, there may be a risk for some people, "
        "particularly those who are unusually sensitive to air pollution.",
        "air-moderate",
    ),
    AQICategory(
        "Unhealthy for Sensitive Groups",
        "Members of sensitive groups may experience health effects. "
        "The general public is not likely to be affected.",
        "air-sensitive",
    ),
    AQICategory(
        "Unhealthy",
        "Everyone may begin to experience health effects; members of sensitive groups "
        "may experience more serious effects.",
        "air-unhealthy",
    ),
    AQICategory(
        "Very Unhealthy",
        "Health alert: Everyone may experience more serious health effects.",
        "air-veryUnhealthy",
    ),
    AQICategory(
        "Hazardous",
        "Health warnings of emergency conditions. The entire population is more likely to be affected.",
        "air-hazardous",
    ),
)

COLOR_HEX = {
    "air-good": "#34d399",
    "air-moderate": "#fbbf24",
    "air-sensitive": "#f97316",
    "air-unhealthy": "#ef4444",
    "air-veryUnhealthy": "#a855f7",
    "air-hazardous": "#7f1d1d",
}

ADVICE = (
    HealthAdvice(
        general="Enjoy your usual outdoor activities.",
        sensitive="Air quality is good for everyone.",
        outdoor="Ideal conditions for all outdoor activities.",
        indoor="No specific recommendations.",
        mask="Mask is not required.",
    ),
    HealthAdvice(
        general="Air quality is acceptable; however, unusually sensitive people should consider "
                "reducing prolonged or heavy exertion.",
        sensitive="People with respiratory issues, children, and the elderly should limit "
                  "prolonged outdoor exertion.",
        outdoor="Most people can enjoy outdoor activities, but sensitive groups should take precautions.",
        indoor="No specific recommendations.",
        mask="Mask is generally not required.",
    ),
    HealthAdvice(
        general="General public is not likely to be affected, but sensitive groups may experience health effects.",
        sensitive="People with heart or lung disease, older adults, and children should reduce "
                  "prolonged or heavy exertion.",
        outdoor="Limit prolonged outdoor exertion.",
        indoor="Consider using an air purifier.",
        mask="Sensitive groups should consider wearing a mask.",
    ),
    HealthAdvice(
        general="Everyone may begin to experience health effects; sensitive groups may experience "
                "more serious effects.",
        sensitive="People with heart or lung disease, older adults, and children should avoid prolonged "
                  "or heavy exertion; everyone else should reduce exertion.",
        outdoor="Reduce outdoor activities.",
        indoor="Use an air purifier and keep windows closed.",
        mask="Everyone should consider wearing a mask, especially outdoors.",
    ),
    HealthAdvice(
        general="Health alert: everyone may experience more serious health effects.",
        sensitive="People with heart or lung disease, older adults, and children should avoid all "
                  "physical activity outdoors; everyone else should avoid prolonged or heavy exertion.",
        outdoor="Avoid all outdoor activities.",
        indoor="Use an air purifier and stay indoors.",
        mask="Everyone should wear a mask, and consider avoiding going out.",
    ),
    HealthAdvice(
        general="Health warnings of emergency conditions. The entire population is more likely to be affected.",
        sensitive="Everyone should remain indoors.",
        outdoor="Avoid all outdoor activities.",
        indoor="Stay indoors and use an air purifier.",
        mask="Everyone should wear a high-quality mask and avoid going out.",
    ),
)


def band_index(aqi):
    """Index of the AQI band (0 = Good ... 5 = Hazardous)"""
    if aqi <= 50: return 0
    elif aqi <= 100: return 1
    elif aqi <= 150: return 2
    elif aqi <= 200: return 3
    elif aqi <= 300: return 4
    else: return 5


def classify(aqi):
    """Get the AQI category (name, description, colour token)"""
    return CATEGORIES[band_index(aqi)]


def color_token(aqi):
    """Get colour token for AQI value"""
    return classify(aqi).color_token


def color_hex(aqi):
    """Get hex colour for AQI value, as used by map markers"""
    return COLOR_HEX[color_token(aqi)]


def recommendations(aqi):
    """Get health recommendations for AQI value"""
    return ADVICE[band_index(aqi)]
