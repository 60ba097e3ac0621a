"""
Gazetteer of Chinese race host cities.

Reference coordinates are city centers; the matcher only needs them to
be within tens of kilometers of a race start.
"""

from typing import Optional

from paceflow.features.gpx.schemas import Coordinates

CITY_COORDINATES: dict[str, Coordinates] = {
    # Municipalities
    "北京": Coordinates(39.9042, 116.4074),
    "上海": Coordinates(31.2304, 121.4737),
    "天津": Coordinates(39.0842, 117.2009),
    "重庆": Coordinates(29.563, 106.5516),
    # Tier-1 cities
    "广州": Coordinates(23.1291, 113.2644),
    "深圳": Coordinates(22.5431, 114.0579),
    "杭州": Coordinates(30.2741, 120.1551),
    "成都": Coordinates(30.5728, 104.0668),
    "武汉": Coordinates(30.5928, 114.3055),
    "西安": Coordinates(34.3416, 108.9398),
    "南京": Coordinates(32.0603, 118.7969),
    "苏州": Coordinates(31.2989, 120.5853),
    # Provincial capitals and major cities
    "厦门": Coordinates(24.4798, 118.0894),
    "青岛": Coordinates(36.0671, 120.3826),
    "大连": Coordinates(38.914, 121.6147),
    "沈阳": Coordinates(41.8057, 123.4315),
    "长沙": Coordinates(28.2282, 112.9388),
    "郑州": Coordinates(34.7466, 113.6253),
    "福州": Coordinates(26.0745, 119.2965),
    "昆明": Coordinates(24.8801, 102.8329),
    "南宁": Coordinates(22.817, 108.3665),
    "贵阳": Coordinates(26.647, 106.6302),
    "兰州": Coordinates(36.0611, 103.8343),
    "哈尔滨": Coordinates(45.8038, 126.535),
    "长春": Coordinates(43.8171, 125.3235),
    "太原": Coordinates(37.8706, 112.5489),
    "石家庄": Coordinates(38.0428, 114.5149),
    "济南": Coordinates(36.6512, 117.1201),
    "合肥": Coordinates(31.8206, 117.2272),
    "南昌": Coordinates(28.682, 115.8579),
    "无锡": Coordinates(31.4912, 120.3119),
    "宁波": Coordinates(29.8683, 121.544),
    "温州": Coordinates(27.9939, 120.6994),
    "东莞": Coordinates(23.043, 113.7633),
    "佛山": Coordinates(23.0218, 113.1219),
    "珠海": Coordinates(22.271, 113.5767),
    "海口": Coordinates(20.044, 110.1999),
    # Zhejiang
    "扬州": Coordinates(32.3936, 119.4126),
    "绍兴": Coordinates(30.0303, 120.5801),
    "嘉兴": Coordinates(30.7522, 120.755),
    "金华": Coordinates(29.0787, 119.6495),
    "台州": Coordinates(28.6563, 121.4208),
    "湖州": Coordinates(30.8927, 120.0934),
    "衢州": Coordinates(28.9569, 118.8593),
    "长兴": Coordinates(31.0261, 119.9106),
    "德清": Coordinates(30.5425, 119.9775),
    "安吉": Coordinates(30.6382, 119.6802),
    # Sichuan
    "雅安": Coordinates(29.9816, 103.0013),
    "泸州": Coordinates(28.8717, 105.4423),
    "乐山": Coordinates(29.5521, 103.7659),
    "绵阳": Coordinates(31.4678, 104.6796),
    "德阳": Coordinates(31.1279, 104.3979),
    "眉山": Coordinates(30.0754, 103.8485),
    "内江": Coordinates(29.5801, 105.0584),
    "自贡": Coordinates(29.3393, 104.7786),
    "攀枝花": Coordinates(26.5823, 101.7185),
    "遂宁": Coordinates(30.5328, 105.5927),
    "南充": Coordinates(30.8373, 106.1106),
    "广元": Coordinates(32.4353, 105.8433),
    "达州": Coordinates(31.2094, 107.4678),
    "宜宾": Coordinates(28.7513, 104.6417),
    "广安": Coordinates(30.4563, 106.6333),
    # Yunnan
    "丽江": Coordinates(26.8721, 100.2299),
    "大理": Coordinates(25.6065, 100.2676),
    "西双版纳": Coordinates(22.0017, 100.7975),
    "普洱": Coordinates(22.7772, 100.9669),
    "曲靖": Coordinates(25.4902, 103.7961),
    "玉溪": Coordinates(24.3528, 102.5428),
    # Guangdong
    "惠州": Coordinates(23.1115, 114.4161),
    "汕头": Coordinates(23.354, 116.6815),
    "中山": Coordinates(22.5176, 113.3926),
    "江门": Coordinates(22.5789, 113.0815),
    "湛江": Coordinates(21.2707, 110.3594),
    "梅州": Coordinates(24.2886, 116.1225),
    "肇庆": Coordinates(23.0469, 112.4654),
    "清远": Coordinates(23.6819, 113.0561),
    # Shandong
    "东营": Coordinates(37.4346, 118.6749),
    "潍坊": Coordinates(36.7069, 119.1619),
    "淄博": Coordinates(36.8131, 118.0548),
    "烟台": Coordinates(37.4638, 121.4479),
    "威海": Coordinates(37.5091, 122.1209),
    "日照": Coordinates(35.4164, 119.5269),
    "临沂": Coordinates(35.1041, 118.3564),
    "泰安": Coordinates(36.1999, 117.0876),
    "菏泽": Coordinates(35.2339, 115.4806),
    # Henan
    "洛阳": Coordinates(34.6197, 112.4539),
    "开封": Coordinates(34.7971, 114.3075),
    "南阳": Coordinates(32.9908, 112.5283),
    "许昌": Coordinates(34.0357, 113.8523),
    "焦作": Coordinates(35.2156, 113.2416),
    "新乡": Coordinates(35.3026, 113.9268),
    "信阳": Coordinates(32.1264, 114.0913),
    # Hebei
    "秦皇岛": Coordinates(39.9354, 119.5996),
    "唐山": Coordinates(39.6292, 118.1802),
    "保定": Coordinates(38.8739, 115.4646),
    "邯郸": Coordinates(36.6256, 114.5391),
    "廊坊": Coordinates(39.5186, 116.6831),
    "张家口": Coordinates(40.8242, 114.8793),
    # Jiangsu
    "常州": Coordinates(31.8113, 119.9741),
    "南通": Coordinates(31.9807, 120.8942),
    "连云港": Coordinates(34.5966, 119.2216),
    "淮安": Coordinates(33.6104, 119.0153),
    "盐城": Coordinates(33.3477, 120.1614),
    "镇江": Coordinates(32.1879, 119.4251),
    "泰州": Coordinates(32.4558, 119.9231),
    "徐州": Coordinates(34.2044, 117.2859),
    # Anhui
    "芜湖": Coordinates(31.3524, 118.4331),
    "蚌埠": Coordinates(32.9168, 117.3893),
    "马鞍山": Coordinates(31.6886, 118.5062),
    "黄山": Coordinates(29.7147, 118.3376),
    "滁州": Coordinates(32.3017, 118.3171),
    "阜阳": Coordinates(32.8896, 115.8142),
    "安庆": Coordinates(30.5432, 117.0634),
    # Fujian
    "泉州": Coordinates(24.8741, 118.6756),
    "漳州": Coordinates(24.5128, 117.6472),
    "莆田": Coordinates(25.454, 119.0077),
    "南平": Coordinates(26.6419, 118.1777),
    "龙岩": Coordinates(25.0758, 117.0171),
    # Hunan
    "株洲": Coordinates(27.8274, 113.1341),
    "衡阳": Coordinates(26.8936, 112.5719),
    "岳阳": Coordinates(29.3572, 113.1289),
    "常德": Coordinates(29.0318, 111.6986),
    "张家界": Coordinates(29.1173, 110.4793),
    "郴州": Coordinates(25.7703, 113.0149),
    # Hubei
    "宜昌": Coordinates(30.6918, 111.2864),
    "襄阳": Coordinates(32.0089, 112.1226),
    "荆州": Coordinates(30.3261, 112.2391),
    "黄冈": Coordinates(30.4461, 114.8724),
    "孝感": Coordinates(30.9247, 113.9269),
    "恩施": Coordinates(30.2722, 109.4886),
    "仙桃": Coordinates(30.3622, 113.4539),
    # Jiangxi
    "九江": Coordinates(29.7051, 116.0019),
    "景德镇": Coordinates(29.2687, 117.1784),
    "赣州": Coordinates(25.8312, 114.9336),
    "上饶": Coordinates(28.4551, 117.9433),
    "吉安": Coordinates(27.1138, 114.9926),
    # Guangxi
    "桂林": Coordinates(25.2736, 110.2907),
    "柳州": Coordinates(24.3264, 109.4281),
    "北海": Coordinates(21.4733, 109.1198),
    # Hainan
    "三亚": Coordinates(18.2528, 109.5119),
    "儋州": Coordinates(19.5175, 109.5809),
    "万宁": Coordinates(18.7962, 110.3926),
    # Guizhou
    "遵义": Coordinates(27.7254, 106.9271),
    "六盘水": Coordinates(26.5929, 104.8307),
    # Hong Kong, Macau, Taiwan
    "香港": Coordinates(22.3193, 114.1694),
    "澳门": Coordinates(22.1987, 113.5439),
    "台北": Coordinates(25.033, 121.5654),
    "高雄": Coordinates(22.6273, 120.3014),
}

KNOWN_CITIES: tuple[str, ...] = tuple(CITY_COORDINATES)

MUNICIPALITIES = frozenset({"北京", "上海", "天津", "重庆"})

PROVINCES = frozenset({
    "北京", "上海", "天津", "重庆",
    "河北", "山西", "辽宁", "吉林", "黑龙江",
    "江苏", "浙江", "安徽", "福建", "江西", "山东",
    "河南", "湖北", "湖南", "广东", "海南",
    "四川", "贵州", "云南", "陕西", "甘肃", "青海", "台湾",
    "内蒙古", "广西", "西藏", "宁夏", "新疆",
})

UNKNOWN_CITY = "未知"


def city_coordinates(city: str) -> Optional[Coordinates]:
    return CITY_COORDINATES.get(city)
