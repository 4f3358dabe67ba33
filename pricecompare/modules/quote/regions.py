"""
行政区划参考数据
Region Reference Data

城市 -> 省份映射与省市下拉数据，供地点匹配与地址解析使用。
"""

from __future__ import annotations

from dataclasses import dataclass


def _expand(province: str, cities: str) -> dict[str, str]:
    return {city: province for city in cities.split()}


# 带后缀的地级市 -> 带后缀的省级名称（与地点表中的名称一致）
CITY_TO_PROVINCE: dict[str, str] = {
    **_expand(
        "广东省",
        "阳江市 清远市 韶关市 茂名市 湛江市 云浮市 肇庆市 广州市 深圳市 珠海市 汕头市 佛山市 "
        "江门市 惠州市 梅州市 汕尾市 河源市 东莞市 中山市 潮州市 揭阳市",
    ),
    **_expand(
        "江苏省",
        "南京市 苏州市 无锡市 常州市 镇江市 扬州市 泰州市 南通市 徐州市 淮安市 盐城市 连云港市 宿迁市",
    ),
    **_expand("浙江省", "杭州市 宁波市 温州市 嘉兴市 湖州市 绍兴市 金华市 衢州市 舟山市 台州市 丽水市"),
    **_expand(
        "山东省",
        "济南市 青岛市 淄博市 枣庄市 东营市 烟台市 潍坊市 济宁市 泰安市 威海市 日照市 临沂市 "
        "德州市 聊城市 滨州市 菏泽市",
    ),
    **_expand("河北省", "石家庄市 唐山市 秦皇岛市 邯郸市 邢台市 保定市 张家口市 承德市 沧州市 廊坊市 衡水市"),
    **_expand(
        "河南省",
        "郑州市 开封市 洛阳市 平顶山市 安阳市 鹤壁市 新乡市 焦作市 濮阳市 许昌市 漯河市 三门峡市 "
        "南阳市 商丘市 信阳市 周口市 驻马店市 济源市",
    ),
    **_expand(
        "四川省",
        "成都市 自贡市 攀枝花市 泸州市 德阳市 绵阳市 广元市 遂宁市 内江市 乐山市 南充市 眉山市 "
        "宜宾市 广安市 达州市 雅安市 巴中市 资阳市",
    ),
    **_expand("湖北省", "武汉市 黄石市 十堰市 宜昌市 襄阳市 鄂州市 荆门市 孝感市 荆州市 黄冈市 咸宁市 随州市"),
    **_expand(
        "湖南省",
        "长沙市 株洲市 湘潭市 衡阳市 邵阳市 岳阳市 常德市 张家界市 益阳市 郴州市 永州市 怀化市 娄底市",
    ),
    **_expand(
        "安徽省",
        "合肥市 芜湖市 蚌埠市 淮南市 马鞍山市 淮北市 铜陵市 安庆市 黄山市 滁州市 阜阳市 宿州市 "
        "六安市 亳州市 池州市 宣城市",
    ),
    **_expand("福建省", "福州市 厦门市 莆田市 三明市 泉州市 漳州市 南平市 龙岩市 宁德市"),
    **_expand("江西省", "南昌市 景德镇市 萍乡市 九江市 新余市 鹰潭市 赣州市 吉安市 宜春市 抚州市 上饶市"),
    **_expand(
        "辽宁省",
        "沈阳市 大连市 鞍山市 抚顺市 本溪市 丹东市 锦州市 营口市 阜新市 辽阳市 盘锦市 铁岭市 朝阳市 葫芦岛市",
    ),
    **_expand("吉林省", "长春市 吉林市 四平市 辽源市 通化市 白山市 松原市 白城市"),
    **_expand(
        "黑龙江省",
        "哈尔滨市 齐齐哈尔市 鸡西市 鹤岗市 双鸭山市 大庆市 伊春市 佳木斯市 七台河市 牡丹江市 黑河市 绥化市",
    ),
    **_expand("陕西省", "西安市 铜川市 宝鸡市 咸阳市 渭南市 延安市 汉中市 榆林市 安康市 商洛市"),
    **_expand(
        "甘肃省",
        "兰州市 嘉峪关市 金昌市 白银市 天水市 武威市 张掖市 平凉市 酒泉市 庆阳市 定西市 陇南市",
    ),
    **_expand("青海省", "西宁市 海东市"),
    **_expand("宁夏回族自治区", "银川市 石嘴山市 吴忠市 固原市 中卫市"),
    **_expand("新疆维吾尔自治区", "乌鲁木齐市 克拉玛依市"),
    **_expand("西藏自治区", "拉萨市 日喀则市 昌都市 林芝市 山南市 那曲市"),
    **_expand(
        "内蒙古自治区",
        "呼和浩特市 包头市 乌海市 赤峰市 通辽市 鄂尔多斯市 呼伦贝尔市 巴彦淖尔市 乌兰察布市",
    ),
    **_expand(
        "广西壮族自治区",
        "南宁市 柳州市 桂林市 梧州市 北海市 防城港市 钦州市 贵港市 玉林市 百色市 贺州市 河池市 来宾市 崇左市",
    ),
    **_expand(
        "云南省",
        "昆明市 曲靖市 玉溪市 保山市 昭通市 丽江市 普洱市 临沧市 楚雄彝族自治州 红河哈尼族彝族自治州 "
        "文山壮族苗族自治州 西双版纳傣族自治州 大理白族自治州 德宏傣族景颇族自治州 怒江傈僳族自治州 迪庆藏族自治州",
    ),
    **_expand("贵州省", "贵阳市 六盘水市 遵义市 安顺市 毕节市 铜仁市"),
    "北京市": "北京市",
    "天津市": "天津市",
    "上海市": "上海市",
    "重庆市": "重庆市",
    "香港特别行政区": "香港特别行政区",
    "澳门特别行政区": "澳门特别行政区",
    **_expand("台湾省", "台北市 高雄市 台中市 台南市 新北市 桃园市 基隆市 新竹市 嘉义市"),
}

# 不带后缀的城市简称 -> 省份，用于自由文本地址推断省份
CITY_SHORT_TO_PROVINCE: dict[str, str] = {
    "北京": "北京市",
    "上海": "上海市",
    "天津": "天津市",
    "重庆": "重庆市",
    **_expand(
        "浙江省",
        "杭州 宁波 温州 嘉兴 湖州 绍兴 金华 衢州 舟山 台州 丽水 义乌 东阳 永康 兰溪 富阳 临安 诸暨 "
        "上虞 嵊州 慈溪 余姚 海宁 桐乡 乐清 温岭 奉化 瑞安",
    ),
    **_expand(
        "江苏省",
        "南京 苏州 无锡 常州 镇江 南通 泰州 扬州 盐城 连云港 徐州 淮安 宿迁 江阴 宜兴 新沂 邳州 溧阳 "
        "金坛 张家港 常熟 太仓 昆山 吴江 如皋 启东 海门 东台 大丰 高邮 仪征 丹阳 扬中 句容 泰兴 靖江 "
        "兴化 姜堰 高港",
    ),
    **_expand(
        "广东省",
        "广州 深圳 珠海 汕头 佛山 韶关 湛江 肇庆 江门 茂名 惠州 梅州 汕尾 河源 阳江 清远 东莞 中山 "
        "潮州 揭阳 云浮 普宁 化州 信宜 潮汕 鹤山 恩平 台山 开平 陆丰 雷州 阳西 阳春 高州",
    ),
    "成都": "四川省",
    "西安": "陕西省",
    "武汉": "湖北省",
    "长沙": "湖南省",
    "郑州": "河南省",
    "济南": "山东省",
    "青岛": "山东省",
    "石家庄": "河北省",
    "太原": "山西省",
    "沈阳": "辽宁省",
    "大连": "辽宁省",
    "长春": "吉林省",
    "哈尔滨": "黑龙江省",
    "合肥": "安徽省",
    "福州": "福建省",
    "厦门": "福建省",
    "南昌": "江西省",
    "南宁": "广西",
    "海口": "海南省",
    "昆明": "云南省",
    "贵阳": "贵州省",
    "兰州": "甘肃省",
    "西宁": "青海省",
    "银川": "宁夏",
    "乌鲁木齐": "新疆",
    "拉萨": "西藏",
    "呼和浩特": "内蒙古",
    "包头": "内蒙古",
}


@dataclass(slots=True)
class ProvinceCities:
    province: str
    cities: list[str]


@dataclass(slots=True)
class RegionOption:
    """省市下拉/搜索选项。"""

    province: str
    city: str
    full_name: str

    def to_dict(self) -> dict[str, str]:
        return {"province": self.province, "city": self.city, "full_name": self.full_name}


PROVINCE_CITY_DATA: list[ProvinceCities] = [
    ProvinceCities(
        "江苏省",
        "南京市 苏州市 无锡市 常州市 镇江市 南通市 泰州市 扬州市 盐城市 连云港市 徐州市 淮安市 宿迁市 "
        "张家港市 常熟市 昆山市 江阴市 金坛市 丹阳市 高港市 泰兴市 邳州市 吴江市".split(),
    ),
    ProvinceCities(
        "浙江省",
        "杭州市 宁波市 温州市 嘉兴市 湖州市 绍兴市 金华市 衢州市 舟山市 台州市 丽水市 富阳市 临安市 "
        "诸暨市 上虞市 嵊州市 慈溪市 余姚市 海宁市 桐乡市 东阳市 兰溪市 永康市 义乌市 乐清市 温岭市 "
        "奉化市 瑞安市".split(),
    ),
    ProvinceCities("上海市", ["上海市"]),
    ProvinceCities("北京市", ["北京"]),
    ProvinceCities("天津市", ["天津"]),
    ProvinceCities("重庆市", ["重庆"]),
    ProvinceCities(
        "广东省",
        "广州市 深圳市 珠海市 汕头市 佛山市 韶关市 湛江市 肇庆市 江门市 茂名市 惠州市 梅州市 汕尾市 "
        "河源市 阳江市 清远市 东莞市 中山市 潮州市 揭阳市 云浮市 普宁市 化州市 信宜市 潮汕 鹤山市 "
        "恩平市 台山市 陆丰市 雷州市 阳西县 阳春市 高州市".split(),
    ),
    ProvinceCities(
        "山东省",
        "济南市 德州市 章丘市 聊城市 泰安市 济宁市 枣庄市 肥城市 菏泽市 莱阳市 烟台市 青岛市 临沂市 "
        "日照市 潍坊市 东营市 滨州市 淄博市 新泰市 莱芜市 威海市 蓬莱市".split(),
    ),
    ProvinceCities(
        "河南省",
        "郑州市 许昌市 安阳市 洛阳市 平顶山市 开封市 焦作市 新乡市 周口市 濮阳市 三门峡市 鹤壁市 "
        "南阳市 漯河市 驻马店市 信阳市".split(),
    ),
    ProvinceCities(
        "湖北省",
        "武汉市 仙桃市 黄冈市 随州市 咸宁市 孝感市 天门市 襄阳市 潜江市 荆州市 黄石市 鄂州市 十堰市 "
        "荆门市 宜昌市".split(),
    ),
    ProvinceCities(
        "湖南省",
        "长沙市 益阳市 株洲市 湘潭市 怀化市 吉首市 岳阳市 郴州市 永州市 衡阳市 常德市".split(),
    ),
    ProvinceCities(
        "江西省",
        "吉安市 九江市 抚州市 景德镇市 南昌市 鹰潭市 宜春市 上饶市 萍乡市 赣州市".split(),
    ),
    ProvinceCities("福建省", "泉州市 莆田市 厦门市 龙岩市 漳州市 福州市 南平市 宁德市 三明市".split()),
    ProvinceCities(
        "安徽省",
        "滁州市 马鞍山市 宣城市 合肥市 六安市 安庆市 芜湖市 铜陵市 池州市 宿州市 蚌埠市 淮北市 亳州市 "
        "阜阳市 黄山市".split(),
    ),
    ProvinceCities(
        "河北省",
        "石家庄市 沧州市 邢台市 衡水市 晋州市 邯郸市 定州市 承德市 廊坊市 秦皇岛市 张家口市 唐山市 保定市".split(),
    ),
    ProvinceCities("山西省", "太原市 临汾市 运城市 忻州市 宿州市 晋中市 阳泉市 大同市 长治市".split()),
    ProvinceCities("陕西省", "宝鸡市 汉中市 安康市 渭南市 咸阳市 榆林市 西安市 铜川 延安".split()),
    ProvinceCities("甘肃省", "庆阳 天水 兰州 金昌 嘉峪关 威武 酒泉 白银".split()),
    ProvinceCities("青海省", "西宁 格尔木 玉树 德令哈".split()),
    ProvinceCities("宁夏", ["银川", "玉树"]),
    ProvinceCities("新疆", "昌吉 乌鲁木齐 克拉玛依 喀什 叶城 阿克苏市 哈密 库尔勒".split()),
    ProvinceCities("西藏", ["拉萨"]),
    ProvinceCities("内蒙古", "呼和浩特 包头 乌海 赤峰 通辽市 满洲里 鄂尔多斯 锡林浩特 二连浩特".split()),
    ProvinceCities(
        "广西",
        "桂林市 梧州市 百色市 钦州市 北海市 河池市 南宁市 崇左市 凭祥市 玉林市 东兴市 贵港市 柳州市 来宾市".split(),
    ),
    ProvinceCities("海南省", ["海口", "湛江市"]),
    ProvinceCities("云南省", "昆明市 曲靖市 玉溪市 丽江市 楚雄市 景洪市 大理市".split()),
    ProvinceCities("贵州省", "铜仁市 贵阳市 黔南布 都匀市 遵义市".split()),
    ProvinceCities(
        "四川省",
        "成都市 都江堰市 彭州市 西昌市 攀枝花市 资阳市 邛崃市 德阳市 眉山市 遂宁市 泸州市 雅安市 崇州市 "
        "南充市 阿坝州 峨眉山市 乐山市 绵阳市 自贡市 宜宾市 内江市 达州市 广安市".split(),
    ),
    ProvinceCities(
        "辽宁省",
        "鞍山市 沈阳市 本溪市 丹东市 抚顺市 东港市 康平市 铁岭市 凤城市 苏家屯市 通辽市 大连市 鲅鱼圈市 "
        "兴城市 盘锦市 营口市 葫芦岛市 阜新市 锦州市".split(),
    ),
    ProvinceCities(
        "吉林省",
        "长春市 辽源市 白山市 公主岭市 吉林市 九台市 船营市 四平市 白城 松原".split(),
    ),
    ProvinceCities("黑龙江省", "哈尔滨 大庆 佳木斯 牡丹江 七台河 双鸭山 齐齐哈尔 嫩江 鹤岗".split()),
]


def extract_province_from_city(city_name: str) -> str | None:
    return CITY_TO_PROVINCE.get(str(city_name or "").strip())


def infer_province_from_city(city: str) -> str:
    """城市简称（不带"市"）推断省份，未知返回空串。"""
    return CITY_SHORT_TO_PROVINCE.get(str(city or "").strip(), "")


def get_all_provinces() -> list[str]:
    return [item.province for item in PROVINCE_CITY_DATA]


def get_cities_by_province(province: str) -> list[str]:
    for item in PROVINCE_CITY_DATA:
        if item.province == province:
            return list(item.cities)
    return []


def search_province_city(query: str, limit: int = 10) -> list[RegionOption]:
    if not str(query or "").strip():
        return []

    lowered = query.lower()
    results: list[RegionOption] = []
    for item in PROVINCE_CITY_DATA:
        if lowered in item.province.lower():
            results.append(RegionOption(province=item.province, city="", full_name=item.province))
        for city in item.cities:
            if lowered in city.lower():
                results.append(RegionOption(province=item.province, city=city, full_name=f"{item.province} {city}"))
    return results[:limit]


def validate_province_city(province: str, city: str) -> bool:
    return city in get_cities_by_province(province)


def get_all_province_city_options() -> list[RegionOption]:
    options = [
        RegionOption(province=item.province, city=city, full_name=f"{item.province} {city}")
        for item in PROVINCE_CITY_DATA
        for city in item.cities
    ]
    return sorted(options, key=lambda option: option.full_name)
