"""方言图鉴：只读的参考数据。"""

from typing import Optional, Tuple

from .models import AtlasItem, Dialect

ATLAS_DATA: Tuple[AtlasItem, ...] = (
    AtlasItem(
        name='川渝话',
        region='成都/重庆/自贡',
        description='巴蜀之言，以幽默豪爽著称。成都话温婉（女娃子说话像撒娇），重庆话硬朗（像吵架），'
                    '自贡话则是恐龙之乡的独特腔调，卷舌音极重。',
        classic_phrase='你抓子嘛',
        classic_meaning='你想干什么',
        features=('儿化音', '变调频繁', '语气助词多'),
        history='湖广填四川后形成的独特官话系统，包容性极强。',
    ),
    AtlasItem(
        name='粤语',
        region='广州/香港',
        description='保留古汉语九声六调，是极具韵律感的语言，被称为“南金之音”。'
                    '广州话更传统，香港话则常混入英文。',
        classic_phrase='好中意你',
        classic_meaning='很喜欢你',
        features=('九声六调', '保留入声', '古雅词汇'),
        history='源自秦汉时期的中原雅言，由南迁的中原人带入岭南。',
    ),
    AtlasItem(
        name='吴语',
        region='上海/苏州',
        description='吴侬软语，以软糯著称。上海话融合了开埠后的海派文化，苏州话则保留了更多的园林雅致。',
        classic_phrase='阿拉去白相',
        classic_meaning='我们去玩',
        features=('全浊音', '连读变调', '软糯细腻'),
        history='江南水乡孕育的千年古音。',
    ),
    AtlasItem(
        name='闽南语',
        region='闽南/台湾',
        description='被称为“古汉语活化石”，词汇与语法中保留了大量的唐宋特征。',
        classic_phrase='爱拼才会赢',
        classic_meaning='努力打拼才会成功',
        features=('十五音', '文白异读', '古汉语底层'),
        history='河洛迁徙至闽，落地生根形成的古音。',
    ),
)


def list_atlas() -> Tuple[AtlasItem, ...]:
    return ATLAS_DATA


def find_atlas_item(name: str) -> Optional[AtlasItem]:
    for item in ATLAS_DATA:
        if item.name == name:
            return item
    return None


# 图鉴条目朗读时使用的方言
ATLAS_DIALECTS = {
    '川渝话': Dialect.SICHUANESE,
    '粤语': Dialect.CANTONESE,
    '吴语': Dialect.SHANGHAINESE,
    '闽南语': Dialect.HOKKIEN,
}


def atlas_dialect(item: AtlasItem) -> Optional[Dialect]:
    return ATLAS_DIALECTS.get(item.name)
