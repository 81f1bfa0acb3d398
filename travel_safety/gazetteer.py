"""
Static gazetteer of known countries and cities.

Countries are listed in a fixed order; the resolver's substring fallback
returns the first match in this order, so reordering changes results.
"""

from typing import Dict, NamedTuple


class CountryEntry(NamedTuple):
    name: str
    code: str


class CityEntry(NamedTuple):
    name: str
    country: str
    lat: float
    lon: float


COUNTRIES: Dict[str, CountryEntry] = {
    'afghanistan': CountryEntry('Afghanistan', 'AF'),
    'argentina': CountryEntry('Argentina', 'AR'),
    'aruba': CountryEntry('Aruba', 'AW'),
    'australia': CountryEntry('Australia', 'AU'),
    'austria': CountryEntry('Austria', 'AT'),
    'bahamas': CountryEntry('Bahamas', 'BS'),
    'barbados': CountryEntry('Barbados', 'BB'),
    'belgium': CountryEntry('Belgium', 'BE'),
    'belize': CountryEntry('Belize', 'BZ'),
    'bolivia': CountryEntry('Bolivia', 'BO'),
    'brazil': CountryEntry('Brazil', 'BR'),
    'canada': CountryEntry('Canada', 'CA'),
    'chile': CountryEntry('Chile', 'CL'),
    'china': CountryEntry('China', 'CN'),
    'colombia': CountryEntry('Colombia', 'CO'),
    'costa rica': CountryEntry('Costa Rica', 'CR'),
    'cuba': CountryEntry('Cuba', 'CU'),
    'curacao': CountryEntry('Curacao', 'CW'),
    'czech republic': CountryEntry('Czech Republic', 'CZ'),
    'denmark': CountryEntry('Denmark', 'DK'),
    'dominican republic': CountryEntry('Dominican Republic', 'DO'),
    'ecuador': CountryEntry('Ecuador', 'EC'),
    'egypt': CountryEntry('Egypt', 'EG'),
    'el salvador': CountryEntry('El Salvador', 'SV'),
    'finland': CountryEntry('Finland', 'FI'),
    'france': CountryEntry('France', 'FR'),
    'germany': CountryEntry('Germany', 'DE'),
    'greece': CountryEntry('Greece', 'GR'),
    'grenada': CountryEntry('Grenada', 'GD'),
    'guatemala': CountryEntry('Guatemala', 'GT'),
    'haiti': CountryEntry('Haiti', 'HT'),
    'honduras': CountryEntry('Honduras', 'HN'),
    'hong kong': CountryEntry('Hong Kong', 'HK'),
    'hungary': CountryEntry('Hungary', 'HU'),
    'iceland': CountryEntry('Iceland', 'IS'),
    'india': CountryEntry('India', 'IN'),
    'indonesia': CountryEntry('Indonesia', 'ID'),
    'iran': CountryEntry('Iran', 'IR'),
    'iraq': CountryEntry('Iraq', 'IQ'),
    'ireland': CountryEntry('Ireland', 'IE'),
    'israel': CountryEntry('Israel', 'IL'),
    'italy': CountryEntry('Italy', 'IT'),
    'jamaica': CountryEntry('Jamaica', 'JM'),
    'japan': CountryEntry('Japan', 'JP'),
    'kenya': CountryEntry('Kenya', 'KE'),
    'mexico': CountryEntry('Mexico', 'MX'),
    'morocco': CountryEntry('Morocco', 'MA'),
    'netherlands': CountryEntry('Netherlands', 'NL'),
    'new zealand': CountryEntry('New Zealand', 'NZ'),
    'nicaragua': CountryEntry('Nicaragua', 'NI'),
    'nigeria': CountryEntry('Nigeria', 'NG'),
    'norway': CountryEntry('Norway', 'NO'),
    'panama': CountryEntry('Panama', 'PA'),
    'paraguay': CountryEntry('Paraguay', 'PY'),
    'peru': CountryEntry('Peru', 'PE'),
    'philippines': CountryEntry('Philippines', 'PH'),
    'poland': CountryEntry('Poland', 'PL'),
    'portugal': CountryEntry('Portugal', 'PT'),
    'puerto rico': CountryEntry('Puerto Rico', 'PR'),
    'russia': CountryEntry('Russia', 'RU'),
    'saint lucia': CountryEntry('Saint Lucia', 'LC'),
    'singapore': CountryEntry('Singapore', 'SG'),
    'south africa': CountryEntry('South Africa', 'ZA'),
    'south korea': CountryEntry('South Korea', 'KR'),
    'spain': CountryEntry('Spain', 'ES'),
    'sweden': CountryEntry('Sweden', 'SE'),
    'switzerland': CountryEntry('Switzerland', 'CH'),
    'thailand': CountryEntry('Thailand', 'TH'),
    'trinidad and tobago': CountryEntry('Trinidad and Tobago', 'TT'),
    'turkey': CountryEntry('Turkey', 'TR'),
    'ukraine': CountryEntry('Ukraine', 'UA'),
    'united arab emirates': CountryEntry('United Arab Emirates', 'AE'),
    'united kingdom': CountryEntry('United Kingdom', 'GB'),
    'united states': CountryEntry('United States', 'US'),
    'uruguay': CountryEntry('Uruguay', 'UY'),
    'venezuela': CountryEntry('Venezuela', 'VE'),
    'vietnam': CountryEntry('Vietnam', 'VN'),
}

CITIES: Dict[str, CityEntry] = {
    # Europe
    'paris': CityEntry('Paris', 'france', 48.8566, 2.3522),
    'london': CityEntry('London', 'united kingdom', 51.5074, -0.1278),
    'edinburgh': CityEntry('Edinburgh', 'united kingdom', 55.9533, -3.1883),
    'dublin': CityEntry('Dublin', 'ireland', 53.3498, -6.2603),
    'barcelona': CityEntry('Barcelona', 'spain', 41.3874, 2.1686),
    'madrid': CityEntry('Madrid', 'spain', 40.4168, -3.7038),
    'lisbon': CityEntry('Lisbon', 'portugal', 38.7223, -9.1393),
    'porto': CityEntry('Porto', 'portugal', 41.1579, -8.6291),
    'amsterdam': CityEntry('Amsterdam', 'netherlands', 52.3676, 4.9041),
    'brussels': CityEntry('Brussels', 'belgium', 50.8503, 4.3517),
    'berlin': CityEntry('Berlin', 'germany', 52.5200, 13.4050),
    'munich': CityEntry('Munich', 'germany', 48.1351, 11.5820),
    'prague': CityEntry('Prague', 'czech republic', 50.0755, 14.4378),
    'vienna': CityEntry('Vienna', 'austria', 48.2082, 16.3738),
    'budapest': CityEntry('Budapest', 'hungary', 47.4979, 19.0402),
    'warsaw': CityEntry('Warsaw', 'poland', 52.2297, 21.0122),
    'krakow': CityEntry('Krakow', 'poland', 50.0647, 19.9450),
    'copenhagen': CityEntry('Copenhagen', 'denmark', 55.6761, 12.5683),
    'stockholm': CityEntry('Stockholm', 'sweden', 59.3293, 18.0686),
    'oslo': CityEntry('Oslo', 'norway', 59.9139, 10.7522),
    'helsinki': CityEntry('Helsinki', 'finland', 60.1699, 24.9384),
    'reykjavik': CityEntry('Reykjavik', 'iceland', 64.1466, -21.9426),
    'zurich': CityEntry('Zurich', 'switzerland', 47.3769, 8.5417),
    'geneva': CityEntry('Geneva', 'switzerland', 46.2044, 6.1432),
    'rome': CityEntry('Rome', 'italy', 41.9028, 12.4964),
    'florence': CityEntry('Florence', 'italy', 43.7696, 11.2558),
    'venice': CityEntry('Venice', 'italy', 45.4408, 12.3155),
    'milan': CityEntry('Milan', 'italy', 45.4642, 9.1900),
    'naples': CityEntry('Naples', 'italy', 40.8518, 14.2681),
    'athens': CityEntry('Athens', 'greece', 37.9838, 23.7275),
    'istanbul': CityEntry('Istanbul', 'turkey', 41.0082, 28.9784),
    'kyiv': CityEntry('Kyiv', 'ukraine', 50.4501, 30.5234),
    'moscow': CityEntry('Moscow', 'russia', 55.7558, 37.6173),
    # Middle East and Africa
    'dubai': CityEntry('Dubai', 'united arab emirates', 25.2048, 55.2708),
    'abu dhabi': CityEntry('Abu Dhabi', 'united arab emirates', 24.4539, 54.3773),
    'cairo': CityEntry('Cairo', 'egypt', 30.0444, 31.2357),
    'tel aviv': CityEntry('Tel Aviv', 'israel', 32.0853, 34.7818),
    'jerusalem': CityEntry('Jerusalem', 'israel', 31.7683, 35.2137),
    'marrakech': CityEntry('Marrakech', 'morocco', 31.6295, -7.9811),
    'cape town': CityEntry('Cape Town', 'south africa', -33.9249, 18.4241),
    'johannesburg': CityEntry('Johannesburg', 'south africa', -26.2041, 28.0473),
    'nairobi': CityEntry('Nairobi', 'kenya', -1.2921, 36.8219),
    'lagos': CityEntry('Lagos', 'nigeria', 6.5244, 3.3792),
    # Asia Pacific
    'tokyo': CityEntry('Tokyo', 'japan', 35.6762, 139.6503),
    'osaka': CityEntry('Osaka', 'japan', 34.6937, 135.5023),
    'kyoto': CityEntry('Kyoto', 'japan', 35.0116, 135.7681),
    'seoul': CityEntry('Seoul', 'south korea', 37.5665, 126.9780),
    'beijing': CityEntry('Beijing', 'china', 39.9042, 116.4074),
    'shanghai': CityEntry('Shanghai', 'china', 31.2304, 121.4737),
    'hong kong': CityEntry('Hong Kong', 'hong kong', 22.3193, 114.1694),
    'singapore': CityEntry('Singapore', 'singapore', 1.3521, 103.8198),
    'bangkok': CityEntry('Bangkok', 'thailand', 13.7563, 100.5018),
    'phuket': CityEntry('Phuket', 'thailand', 7.8804, 98.3923),
    'bali': CityEntry('Bali', 'indonesia', -8.3405, 115.0920),
    'jakarta': CityEntry('Jakarta', 'indonesia', -6.2088, 106.8456),
    'manila': CityEntry('Manila', 'philippines', 14.5995, 120.9842),
    'hanoi': CityEntry('Hanoi', 'vietnam', 21.0278, 105.8342),
    'ho chi minh city': CityEntry('Ho Chi Minh City', 'vietnam', 10.8231, 106.6297),
    'mumbai': CityEntry('Mumbai', 'india', 19.0760, 72.8777),
    'delhi': CityEntry('Delhi', 'india', 28.7041, 77.1025),
    'sydney': CityEntry('Sydney', 'australia', -33.8688, 151.2093),
    'melbourne': CityEntry('Melbourne', 'australia', -37.8136, 144.9631),
    'auckland': CityEntry('Auckland', 'new zealand', -36.8485, 174.7633),
    'queenstown': CityEntry('Queenstown', 'new zealand', -45.0312, 168.6626),
    # North America
    'new york': CityEntry('New York', 'united states', 40.7128, -74.0060),
    'los angeles': CityEntry('Los Angeles', 'united states', 34.0522, -118.2437),
    'san francisco': CityEntry('San Francisco', 'united states', 37.7749, -122.4194),
    'chicago': CityEntry('Chicago', 'united states', 41.8781, -87.6298),
    'miami': CityEntry('Miami', 'united states', 25.7617, -80.1918),
    'vancouver': CityEntry('Vancouver', 'canada', 49.2827, -123.1207),
    'toronto': CityEntry('Toronto', 'canada', 43.6532, -79.3832),
    'montreal': CityEntry('Montreal', 'canada', 45.5017, -73.5673),
    'mexico city': CityEntry('Mexico City', 'mexico', 19.4326, -99.1332),
    'cancun': CityEntry('Cancun', 'mexico', 21.1619, -86.8515),
    'cabo': CityEntry('Cabo San Lucas', 'mexico', 22.8905, -109.9167),
    'guadalajara': CityEntry('Guadalajara', 'mexico', 20.6597, -103.3496),
    'monterrey': CityEntry('Monterrey', 'mexico', 25.6866, -100.3161),
    'tulum': CityEntry('Tulum', 'mexico', 20.2114, -87.4654),
    'playa del carmen': CityEntry('Playa del Carmen', 'mexico', 20.6296, -87.0739),
    'oaxaca': CityEntry('Oaxaca', 'mexico', 17.0732, -96.7266),
    'puerto vallarta': CityEntry('Puerto Vallarta', 'mexico', 20.6534, -105.2253),
    # Central America and Caribbean
    'guatemala city': CityEntry('Guatemala City', 'guatemala', 14.6349, -90.5069),
    'san salvador': CityEntry('San Salvador', 'el salvador', 13.6929, -89.2182),
    'tegucigalpa': CityEntry('Tegucigalpa', 'honduras', 14.0723, -87.1921),
    'san pedro sula': CityEntry('San Pedro Sula', 'honduras', 15.5042, -88.0250),
    'managua': CityEntry('Managua', 'nicaragua', 12.1150, -86.2362),
    'san jose': CityEntry('San Jose', 'costa rica', 9.9281, -84.0907),
    'panama city': CityEntry('Panama City', 'panama', 8.9824, -79.5199),
    'belize city': CityEntry('Belize City', 'belize', 17.5046, -88.1962),
    'havana': CityEntry('Havana', 'cuba', 23.1136, -82.3666),
    'santo domingo': CityEntry('Santo Domingo', 'dominican republic', 18.4861, -69.9312),
    'punta cana': CityEntry('Punta Cana', 'dominican republic', 18.5601, -68.3725),
    'san juan': CityEntry('San Juan', 'puerto rico', 18.4655, -66.1057),
    'kingston': CityEntry('Kingston', 'jamaica', 17.9712, -76.7936),
    'montego bay': CityEntry('Montego Bay', 'jamaica', 18.4762, -77.8939),
    'port-au-prince': CityEntry('Port-au-Prince', 'haiti', 18.5944, -72.3074),
    'nassau': CityEntry('Nassau', 'bahamas', 25.0443, -77.3504),
    'bridgetown': CityEntry('Bridgetown', 'barbados', 13.0975, -59.6167),
    'oranjestad': CityEntry('Oranjestad', 'aruba', 12.5092, -70.0086),
    'willemstad': CityEntry('Willemstad', 'curacao', 12.1091, -68.9316),
    'castries': CityEntry('Castries', 'saint lucia', 14.0101, -60.9875),
    'st george': CityEntry("St. George's", 'grenada', 12.0561, -61.7488),
    'port of spain': CityEntry('Port of Spain', 'trinidad and tobago', 10.6549, -61.5019),
    # South America
    'medellin': CityEntry('Medellin', 'colombia', 6.2442, -75.5812),
    'bogota': CityEntry('Bogota', 'colombia', 4.7110, -74.0721),
    'cartagena': CityEntry('Cartagena', 'colombia', 10.3910, -75.4794),
    'cali': CityEntry('Cali', 'colombia', 3.4516, -76.5320),
    'quito': CityEntry('Quito', 'ecuador', -0.1807, -78.4678),
    'guayaquil': CityEntry('Guayaquil', 'ecuador', -2.1710, -79.9224),
    'lima': CityEntry('Lima', 'peru', -12.0464, -77.0428),
    'cusco': CityEntry('Cusco', 'peru', -13.5320, -71.9675),
    'la paz': CityEntry('La Paz', 'bolivia', -16.4897, -68.1193),
    'rio de janeiro': CityEntry('Rio de Janeiro', 'brazil', -22.9068, -43.1729),
    'sao paulo': CityEntry('Sao Paulo', 'brazil', -23.5505, -46.6333),
    'salvador': CityEntry('Salvador', 'brazil', -12.9777, -38.5016),
    'buenos aires': CityEntry('Buenos Aires', 'argentina', -34.6037, -58.3816),
    'mendoza': CityEntry('Mendoza', 'argentina', -32.8895, -68.8458),
    'santiago': CityEntry('Santiago', 'chile', -33.4489, -70.6693),
    'montevideo': CityEntry('Montevideo', 'uruguay', -34.9011, -56.1645),
    'asuncion': CityEntry('Asuncion', 'paraguay', -25.2637, -57.5759),
    'caracas': CityEntry('Caracas', 'venezuela', 10.4806, -66.9036),
    'maracaibo': CityEntry('Maracaibo', 'venezuela', 10.6545, -71.6406),
}

# Alternative spellings, abbreviations and accented forms -> canonical key.
ALIASES: Dict[str, str] = {
    'nyc': 'new york',
    'new york city': 'new york',
    'ny': 'new york',
    'la': 'los angeles',
    'sf': 'san francisco',
    'cdmx': 'mexico city',
    'df': 'mexico city',
    'ciudad de mexico': 'mexico city',
    'ciudad de méxico': 'mexico city',
    'cabo san lucas': 'cabo',
    'cancún': 'cancun',
    'medellín': 'medellin',
    'bogotá': 'bogota',
    'são paulo': 'sao paulo',
    'rio': 'rio de janeiro',
    'asunción': 'asuncion',
    'zürich': 'zurich',
    'münchen': 'munich',
    'kraków': 'krakow',
    'kiev': 'kyiv',
    'bombay': 'mumbai',
    'new delhi': 'delhi',
    'saigon': 'ho chi minh city',
    'peking': 'beijing',
    'uk': 'united kingdom',
    'great britain': 'united kingdom',
    'britain': 'united kingdom',
    'england': 'united kingdom',
    'usa': 'united states',
    'us': 'united states',
    'america': 'united states',
    'united states of america': 'united states',
    'uae': 'united arab emirates',
    'emirates': 'united arab emirates',
    'holland': 'netherlands',
    'the netherlands': 'netherlands',
    'czechia': 'czech republic',
    'korea': 'south korea',
    'türkiye': 'turkey',
    'turkiye': 'turkey',
    'curaçao': 'curacao',
    'st lucia': 'saint lucia',
    'the bahamas': 'bahamas',
    'trinidad': 'trinidad and tobago',
}
