"""Bundled sentences used when no generator is reachable.

Each entry is ``(hanzi, pinyin, english)``.
"""
from __future__ import annotations

CURATED_SENTENCES = [
    ("今天北京的空气质量不太好，建议戴口罩出门。",
     "Jīntiān Běijīng de kōngqì zhìliàng bù tài hǎo, jiànyì dài kǒuzhào chūmén.",
     "Today's air quality in Beijing isn't very good, it's recommended to wear a mask when going out."),
    ("这家餐厅的招牌菜是麻婆豆腐，非常正宗。",
     "Zhè jiā cāntīng de zhāopáicài shì mápó dòufu, fēicháng zhèngzōng.",
     "This restaurant's signature dish is mapo tofu, it's very authentic."),
    ("我刚刚在地铁里丢了手机，正在找失物招领处。",
     "Wǒ gānggāng zài dìtiě lǐ diūle shǒujī, zhèngzài zhǎo shīwù zhāolǐng chù.",
     "I just lost my phone on the subway and I'm looking for the lost and found."),
    ("春节期间，很多商店都会放假回家过年。",
     "Chūnjié qījiān, hěnduō shāngdiàn dōu huì fàngjià huí jiā guònián.",
     "During Spring Festival, many shops will close and people go home to celebrate the New Year."),
    ("学会使用筷子需要一些练习，但是并不难。",
     "Xuéhuì shǐyòng kuàizi xūyào yīxiē liànxí, dànshì bìng bù nán.",
     "Learning to use chopsticks requires some practice, but it's not difficult."),
    # Work
    ("我们公司最近搬到了新的办公楼，环境比以前好多了。",
     "Wǒmen gōngsī zuìjìn bāndàole xīn de bàngōnglóu, huánjìng bǐ yǐqián hǎo duōle.",
     "Our company recently moved to a new office building, the environment is much better than before."),
    ("今天的会议讨论了下个季度的销售目标。",
     "Jīntiān de huìyì tǎolùnle xià gè jìdù de xiāoshòu mùbiāo.",
     "Today's meeting discussed next quarter's sales targets."),
    ("老板说如果项目成功的话，大家都会有奖金。",
     "Lǎobǎn shuō rúguǒ xiàngmù chénggōng de huà, dàjiā dōu huì yǒu jiǎngjīn.",
     "The boss said if the project succeeds, everyone will get a bonus."),
    ("我正在学习新的软件，希望能提高工作效率。",
     "Wǒ zhèngzài xuéxí xīn de ruǎnjiàn, xīwàng néng tígāo gōngzuò xiàolǜ.",
     "I'm learning new software, hoping to improve work efficiency."),
    ("同事们邀请我参加周末的团建活动。",
     "Tóngshìmen yāoqǐng wǒ cānjiā zhōumò de tuánjiàn huódòng.",
     "My colleagues invited me to join the weekend team-building activity."),
    # Daily life
    ("超市里的蔬菜很新鲜，价格也比较合理。",
     "Chāoshì lǐ de shūcài hěn xīnxiān, jiàgé yě bǐjiào hélǐ.",
     "The vegetables in the supermarket are very fresh and reasonably priced."),
    ("今天天气预报说下午可能会下雨。",
     "Jīntiān tiānqì yùbào shuō xiàwǔ kěnéng huì xiàyǔ.",
     "Today's weather forecast says it might rain this afternoon."),
    ("我在健身房办了年卡，打算坚持锻炼身体。",
     "Wǒ zài jiànshēnfáng bànle niánkǎ, dǎsuàn jiānchí duànliàn shēntǐ.",
     "I got an annual membership at the gym and plan to stick to exercising."),
    ("邻居家的小狗很可爱，每天都会跟我打招呼。",
     "Línjū jiā de xiǎogǒu hěn kě'ài, měitiān dōu huì gēn wǒ dǎ zhāohū.",
     "My neighbor's little dog is very cute and greets me every day."),
    ("周末我喜欢在家里做饭，尝试不同的菜谱。",
     "Zhōumò wǒ xǐhuan zài jiālǐ zuòfàn, chángshì bùtóng de càipǔ.",
     "On weekends I like to cook at home and try different recipes."),
    # Culture
    ("春节期间，大家都忙着准备年夜饭。",
     "Chūnjié qījiān, dàjiā dōu mángzhe zhǔnbèi niányèfàn.",
     "During Spring Festival, everyone is busy preparing the New Year's Eve dinner."),
    ("这个电视剧最近很受欢迎，朋友们都在讨论剧情。",
     "Zhège diànshìjù zuìjìn hěn shòu huānyíng, péngyǒumen dōu zài tǎolùn jùqíng.",
     "This TV drama is very popular recently, friends are all discussing the plot."),
    ("中国的高铁速度很快，从北京到上海只需要几个小时。",
     "Zhōngguó de gāotiě sùdù hěn kuài, cóng Běijīng dào Shànghǎi zhǐ xūyào jǐ gè xiǎoshí.",
     "China's high-speed rail is very fast, it only takes a few hours from Beijing to Shanghai."),
    ("现在很多人喜欢用手机支付，现金用得越来越少了。",
     "Xiànzài hěnduō rén xǐhuan yòng shǒujī zhīfù, xiànjīn yòng dé yuèláiyuè shǎole.",
     "Now many people like to pay with their phones, cash is used less and less."),
    ("学习汉语的外国人越来越多，中文学校也在增加。",
     "Xuéxí Hànyǔ de wàiguórén yuèláiyuè duō, zhōngwén xuéxiào yě zài zēngjiā.",
     "More and more foreigners are learning Chinese, and Chinese schools are also increasing."),
]

# Written as-is when the whole content chain fails on an empty day.
SEED_SENTENCES = [
    ("我在北京工作了三年，现在想回家乡发展。",
     "Wǒ zài Běijīng gōngzuòle sān nián, xiànzài xiǎng huí jiāxiāng fāzhǎn.",
     "I've worked in Beijing for three years, and now I want to go back to my hometown to develop my career."),
    ("这道菜有点儿咸，不过味道还不错。",
     "Zhè dào cài yǒu diǎnr xián, búguò wèidào hái búcuò.",
     "This dish is a bit salty, but the flavor is still pretty good."),
    ("由于交通堵塞，我迟到了半个小时。",
     "Yóuyú jiāotōng dǔsè, wǒ chídàole bàn gè xiǎoshí.",
     "Due to traffic congestion, I was half an hour late."),
    ("她不仅会说英语，还会说法语和德语。",
     "Tā bùjǐn huì shuō Yīngyǔ, hái huì shuō Fǎyǔ hé Déyǔ.",
     "She not only speaks English, but also speaks French and German."),
    ("虽然今天下雨，但是我们的计划不会改变。",
     "Suīrán jīntiān xiàyǔ, dànshì wǒmen de jìhuà bù huì gǎibiàn.",
     "Although it's raining today, our plans won't change."),
]
