"""Compiled-in destinations for the default road-trip dataset."""

from __future__ import annotations

from typing import Final

from trip_reveal.models import Destination

DEFAULT_DESTINATIONS: Final[tuple[Destination, ...]] = (
    Destination("New York", 40.7128, -74.0060, "city", "🗽"),
    Destination("Mentor, OH", 41.6662, -81.3397, "city", "🏘️"),
    Destination("Chicago, IL", 41.8781, -87.6298, "city", "🌆"),
    Destination("Mount Rushmore, SD", 43.8791, -103.4591, "landmark", "⛰️"),
    Destination("Grand Teton NP, WY", 43.7904, -110.6818, "national-park", "🏔️"),
    Destination("Yellowstone NP", 44.4280, -110.5885, "national-park", "🌋"),
    Destination("Glacier NP, MT", 48.7596, -113.7870, "national-park", "❄️"),
    Destination("Banff NP, AB", 51.4968, -115.9281, "landmark", "🇨🇦"),
    Destination("Kelowna, BC", 49.8880, -119.4960, "city", "🍷"),
    Destination("Vancouver, BC", 49.2827, -123.1207, "city", "🌊"),
    Destination("San Juan Islands, WA", 48.5312, -123.0245, "landmark", "🏝️"),
    Destination("Olympic NP, WA", 47.8021, -123.6044, "national-park", "🌲"),
    Destination("Mount Rainier NP, WA", 46.8523, -121.7603, "national-park", "🗻"),
    Destination("Mount St. Helens, WA", 46.1912, -122.1944, "landmark", "🌋"),
    Destination("Portland, OR", 45.5155, -122.6789, "city", "🌹"),
    Destination("Crater Lake NP, OR", 42.8684, -122.1685, "national-park", "💙"),
    Destination("Crescent City, CA", 41.7557, -124.2026, "city", "🌊"),
    Destination("Redwood NP, CA", 41.2132, -124.0046, "national-park", "🌲"),
    Destination("Fort Bragg, CA", 39.4457, -123.8053, "city", "🏖️"),
    Destination("Santa Cruz, CA", 36.9741, -122.0308, "city", "🎢"),
    Destination("Monterey, CA", 36.6002, -121.8947, "city", "🦦"),
    Destination("Carmel-by-the-Sea, CA", 36.5552, -121.9233, "city", "🎨"),
    Destination("Pinnacles NP, CA", 36.4906, -121.1825, "national-park", "🦅"),
    Destination("Morro Bay, CA", 35.3658, -120.8499, "city", "🪨"),
    Destination("Santa Barbara, CA", 34.4208, -119.6982, "city", "🌴"),
    Destination("Ventura, CA", 34.2746, -119.2290, "city", "🏄"),
    Destination("Channel Islands NP, CA", 34.0069, -119.7785, "national-park", "🏝️"),
    Destination("Los Angeles, CA", 34.0522, -118.2437, "city", "🎬"),
    Destination("San Diego, CA", 32.7157, -117.1611, "city", "🌮"),
    Destination("Tijuana, MX", 32.5149, -117.0382, "city", "🇲🇽"),
    Destination("Joshua Tree NP, CA", 33.8734, -115.9010, "national-park", "🌵"),
    Destination("Las Vegas, NV", 36.1699, -115.1398, "city", "🎰"),
    Destination("Death Valley NP", 36.5323, -116.9325, "national-park", "🏜️"),
    Destination("Boulder City, NV", 35.9786, -114.8325, "city", "🏘️"),
    Destination("Hoover Dam", 36.0161, -114.7377, "landmark", "🏗️"),
    Destination("Grand Canyon, AZ", 36.1069, -112.1129, "national-park", "🏞️"),
    Destination("Zion NP, UT", 37.2982, -113.0263, "national-park", "⛰️"),
    Destination("Bryce Canyon NP, UT", 37.5930, -112.1871, "national-park", "🪨"),
    Destination("Salt Lake City, UT", 40.7608, -111.8910, "city", "🏔️"),
    Destination("Arches NP, UT", 38.7331, -109.5925, "national-park", "🌉"),
    Destination("Red Rocks, CO", 39.6654, -105.2057, "landmark", "🎸"),
    Destination("Gateway Arch NP, MO", 38.6247, -90.1848, "national-park", "🌁"),
    Destination("Kansas", 38.5266, -96.7265, "state", "🌾"),
    Destination("Missouri", 38.4561, -92.2884, "state", "🏛️"),
    Destination("Illinois", 40.3495, -88.9861, "state", "🌽"),
    Destination("Kentucky", 37.6690, -84.6701, "state", "🐴"),
    Destination("West Virginia", 38.4912, -80.9546, "state", "⛰️"),
    Destination("New River Gorge NP, WV", 37.9739, -81.0629, "national-park", "🌉"),
    Destination("Baltimore, MD", 39.2904, -76.6122, "city", "🦀"),
    Destination("Home (Upstate NY)", 43.1246, -75.3070, "city", "🏡"),
)
