"""
Category vocabulary and the keyword tables used by the classifier fallbacks
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Pattern, Tuple


DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "프론트엔드 개발",
    "백엔드 개발",
    "클라우드 & DevOps",
    "데이터베이스",
    "데이터 분석",
    "모바일 앱 개발",
    "인공지능",
    "게임 개발",
    "블록체인",
    "보안",
    "기타",
)

CATEGORY_DESCRIPTIONS: Dict[str, str] = {
    "프론트엔드 개발": "HTML, CSS, JavaScript, React, Vue, Angular, Next.js, Svelte",
    "백엔드 개발": "servers, APIs, Node.js, Express, Spring, Django, NestJS, Laravel, Ruby on Rails",
    "클라우드 & DevOps": "AWS, Azure, GCP, Docker, Kubernetes, CI/CD, Jenkins, GitHub Actions, Terraform",
    "데이터베이스": "SQL, NoSQL, MySQL, PostgreSQL, MongoDB, Redis, GraphQL, ORM, query tuning",
    "데이터 분석": "visualization, statistics, Pandas, Tableau, Python, R, big data, data pipelines",
    "모바일 앱 개발": "Android, iOS, Flutter, React Native, Swift, Kotlin",
    "인공지능": "AI, machine learning, deep learning, TensorFlow, PyTorch, LLM, NLP",
    "게임 개발": "Unity, Unreal Engine, game engines, 3D rendering, game programming",
    "블록체인": "cryptocurrency, Web3, Ethereum, Solidity, smart contracts, NFT",
    "보안": "cybersecurity, hacking, penetration testing, encryption, authentication, authorization",
    "기타": "technical content that fits none of the categories above",
}

DEFAULT_KEYWORD_PATTERNS: Dict[str, str] = {
    "프론트엔드 개발": r"프론트엔드|frontend|프론트|front-end|html|css|javascript|js|react|vue|angular|svelte|웹개발|web\s?development|ui|ux|사용자\s?인터페이스|nextjs|gatsby",
    "백엔드 개발": r"백엔드|backend|서버|back-end|server|api|node|express|spring|django|nestjs|laravel|php|ruby|rails|python|java|서버\s?개발|fastapi|go|golang|rest|restful",
    "클라우드 & DevOps": r"클라우드|cloud|devops|aws|azure|gcp|도커|docker|kubernetes|k8s|ci/cd|배포|infrastructure|인프라|terraform|ansible|jenkins|github\s?actions|deployment|서버리스|serverless",
    "데이터베이스": r"데이터베이스|db|database|sql|nosql|mysql|postgresql|mongodb|oracle|redis|supabase|firebase|firestore|dynamodb|mariadb|데이터\s?모델링|쿼리|query|orm|인덱싱|indexing",
    "데이터 분석": r"데이터\s?분석|data\s?analysis|데이터|빅데이터|bigdata|통계|statistics|pandas|tableau|분석|analysis|시각화|visualization|대시보드|dashboard|데이터\s?마이닝|data\s?mining|etl|power\s?bi|looker|metabase|차트|chart",
    "모바일 앱 개발": r"모바일|mobile|앱|app|android|안드로이드|ios|아이폰|flutter|react\s?native|swift|kotlin|objective-c|xamarin|앱\s?개발|app\s?development|모바일\s?앱|mobile\s?app",
    "인공지능": r"인공지능|ai|머신러닝|machine\s?learning|ml|딥러닝|deep\s?learning|dl|tensorflow|pytorch|인공|artificial|gpt|nlp|자연어|natural\s?language|computer\s?vision|컴퓨터\s?비전|chatgpt|openai|huggingface|llm|large\s?language\s?model",
    "게임 개발": r"게임|game|유니티|unity|언리얼|unreal|gaming|게임엔진|game\s?engine|게임\s?개발|game\s?development|게임\s?프로그래밍|3d|렌더링|rendering|게임\s?디자인|godot",
    "블록체인": r"블록체인|blockchain|암호화폐|crypto|web3|ethereum|nft|솔리디티|solidity|비트코인|이더리움|스마트\s?컨트랙트|smart\s?contract|토큰|token|dapp|wallet|지갑|코인|coin|분산|decentralized",
    "보안": r"보안|security|해킹|hacking|사이버|cyber|침투|penetration|취약점|vulnerability|암호화|encryption|인증|authentication|권한|authorization|firewall|방화벽|ssl|tls|owasp|보안\s?감사|audit",
}

DEFAULT_DOMAIN_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "프론트엔드 개발": (
        "reactjs.org", "vuejs.org", "angular.io", "css-tricks", "smashingmagazine",
        "frontendmasters", "cssinjs", "styled-components", "tailwindcss",
        "javascript.info", "nextjs", "svelte", "webpack", "frontendex", "ui", "ux",
        "design", "webdev",
    ),
    "백엔드 개발": (
        "nodejs.org", "expressjs.com", "spring.io", "djangoproject.com", "nestjs.com",
        "rubyonrails.org", "laravel.com", "fastapi", "flask", "php.net", "webserver",
        "api", "rest", "graphql", "microservice", "serverless",
    ),
    "클라우드 & DevOps": (
        "aws.amazon", "azure.microsoft", "cloud.google", "docker.com", "kubernetes.io",
        "terraform.io", "jenkins", "circleci", "heroku", "netlify", "vercel",
        "digitalocean", "cloudflare", "nginx", "devop",
    ),
    "데이터베이스": (
        "mysql.com", "postgresql.org", "mongodb.com", "redis.io", "mariadb", "supabase",
        "firebase", "dynamodb", "cosmosdb", "cassandra", "couchdb", "elasticsearch",
        "prisma.io", "sequelize", "typeorm", "indexing", "query",
    ),
    "데이터 분석": (
        "kaggle.com", "tableau.com", "powerbi", "analytics", "pandas.pydata",
        "numpy.org", "datacamp", "databricks", "jupyter", "colab", "matplotlib",
        "seaborn", "plotly", "dash", "metabase", "superset", "looker", "bigquery",
    ),
    "모바일 앱 개발": (
        "developer.android", "developer.apple", "flutter.dev", "reactnative",
        "ionicframework", "xamarin", "kotlinlang", "swift", "objective-c",
        "androidstudio", "xcode", "mobiledev", "appdev",
    ),
    "인공지능": (
        "tensorflow.org", "pytorch.org", "huggingface.co", "openai", "deepmind",
        "kaggle", "machinelearning", "deeplearning", "neuralnetwork", "llm", "nlp",
        "transformers", "gpt", "langchain", "opencv",
    ),
    "게임 개발": (
        "unity.com", "unrealengine.com", "gamedev", "gamasutra", "godotengine",
        "gamejolt", "itch.io", "playcanvas", "roblox", "gamemaker", "3dengine",
    ),
    "블록체인": (
        "ethereum.org", "blockchain", "web3", "solidity", "crypto", "bitcoin",
        "metamask", "opensea", "nft", "defi", "smartcontract", "coinmarketcap",
        "binance", "polkadot", "cardano", "tokenomics", "wallet",
    ),
    "보안": (
        "hackerone", "bugcrowd", "owasp.org", "security", "cyber", "pentesting", "snyk",
        "veracode", "nessus", "burpsuite", "metasploit", "kali", "cryptography",
        "infosec", "encryption", "firewall", "authentication", "authorization",
    ),
}

DEFAULT_PATH_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "프론트엔드 개발": (
        "frontend", "html", "css", "javascript", "react", "vue", "angular", "webdesign",
        "ui", "ux", "responsive", "web-app", "spa", "pwa", "tailwind", "sass", "less",
        "dom", "typescript", "nextjs", "svelte",
    ),
    "백엔드 개발": (
        "backend", "server", "api", "node", "express", "spring", "django", "laravel",
        "php", "ruby", "rails", "fastapi", "dotnet", "java", "python", "serverless",
        "microservice", "restful", "graphql", "nestjs",
    ),
    "클라우드 & DevOps": (
        "cloud", "devops", "aws", "azure", "docker", "kubernetes", "cicd", "jenkins",
        "gitlab", "github-actions", "terraform", "infrastructure", "deployment",
        "monitoring", "logging", "prometheus", "grafana", "nginx", "lambda",
        "elasticbean",
    ),
    "데이터베이스": (
        "database", "sql", "nosql", "mysql", "postgresql", "mongodb", "redis",
        "firebase", "orm", "query", "indexing", "sharding", "replication", "prisma",
        "typeorm", "sequelize", "normalization", "transactions", "acid", "migration",
        "schema", "supabase",
    ),
    "데이터 분석": (
        "data-analysis", "analytics", "statistics", "pandas", "tableau",
        "visualization", "dashboard", "data-science", "jupyter", "bigdata", "etl",
        "powerbi", "excel", "spreadsheet", "pivot", "forecasting", "bi",
        "business-intelligence", "matplotlib", "seaborn",
    ),
    "모바일 앱 개발": (
        "mobile", "android", "ios", "flutter", "react-native", "swift", "kotlin",
        "xamarin", "ionic", "objective-c", "app-development", "mobile-app",
        "appstore", "playstore", "progressive-web-app", "cordova", "capacitor",
    ),
    "인공지능": (
        "ai", "machine-learning", "deep-learning", "tensorflow", "pytorch",
        "neural-network", "natural-language-processing", "nlp", "computer-vision",
        "image-recognition", "reinforcement-learning", "model", "training", "dataset",
        "prediction", "classifier", "regression", "gpt", "llm", "ml",
    ),
    "게임 개발": (
        "game", "unity", "unreal", "gaming", "3d", "rendering", "game-engine", "shader",
        "animation", "character-design", "level-design", "game-mechanics",
        "player-experience", "multiplayer", "gamedev", "indies", "puzzle-game",
    ),
    "블록체인": (
        "blockchain", "crypto", "web3", "ethereum", "solidity", "smart-contract",
        "token", "wallet", "defi", "nft", "bitcoin", "altcoin", "mining", "consensus",
        "dao", "decentralized", "chain", "ledger", "transaction",
    ),
    "보안": (
        "security", "hacking", "cybersecurity", "pentest", "vulnerability", "exploit",
        "encryption", "authentication", "authorization", "firewall", "mitigation",
        "protection", "risk", "threat", "assessment", "compliance", "privacy",
    ),
}


def _compile_patterns(patterns: Mapping[str, str]) -> Tuple[Tuple[str, Pattern[str]], ...]:
    return tuple((category, re.compile(pattern, re.IGNORECASE)) for category, pattern in patterns.items())


def _freeze_keywords(table: Mapping[str, Iterable[str]]) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
    return tuple((category, tuple(k.lower() for k in keywords)) for category, keywords in table.items())


@dataclass(frozen=True)
class CategoryTaxonomy:
    """Closed category vocabulary plus the tables the fallback chain consults.

    Tables are ordered tuples of (category, value) pairs; the first matching
    category wins wherever a table is scanned.
    """
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    default_category: str = "기타"
    insufficient_content: str = "콘텐츠 부족"
    analysis_failed: str = "분석 실패"
    descriptions: Tuple[Tuple[str, str], ...] = tuple(CATEGORY_DESCRIPTIONS.items())
    keyword_patterns: Tuple[Tuple[str, Pattern[str]], ...] = field(
        default_factory=lambda: _compile_patterns(DEFAULT_KEYWORD_PATTERNS)
    )
    domain_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...] = field(
        default_factory=lambda: _freeze_keywords(DEFAULT_DOMAIN_KEYWORDS)
    )
    path_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...] = field(
        default_factory=lambda: _freeze_keywords(DEFAULT_PATH_KEYWORDS)
    )

    def __post_init__(self):
        if self.default_category not in self.categories:
            raise ValueError(f"Default category {self.default_category!r} is not in the vocabulary")

    @property
    def pseudo_categories(self) -> Tuple[str, str]:
        return (self.insufficient_content, self.analysis_failed)

    def is_valid(self, category: str) -> bool:
        """True for vocabulary members and pipeline-status pseudo-categories."""
        return category in self.categories or category in self.pseudo_categories

    def describe(self, category: str) -> str:
        return dict(self.descriptions).get(category, "")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CategoryTaxonomy":
        """Build a taxonomy from a config mapping, keeping defaults for missing keys."""
        if not data:
            return cls()

        kwargs: Dict[str, Any] = {}
        if "categories" in data:
            kwargs["categories"] = tuple(data["categories"])
        for key in ["default_category", "insufficient_content", "analysis_failed"]:
            if key in data:
                kwargs[key] = data[key]
        if "descriptions" in data:
            kwargs["descriptions"] = tuple(data["descriptions"].items())
        if "keyword_patterns" in data:
            kwargs["keyword_patterns"] = _compile_patterns(data["keyword_patterns"])
        if "domain_keywords" in data:
            kwargs["domain_keywords"] = _freeze_keywords(data["domain_keywords"])
        if "path_keywords" in data:
            kwargs["path_keywords"] = _freeze_keywords(data["path_keywords"])

        return cls(**kwargs)


DEFAULT_TAXONOMY = CategoryTaxonomy()
