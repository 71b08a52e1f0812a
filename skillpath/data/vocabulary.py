# vocabulary.py
"""Static skill vocabulary: synonym table, excluded tooling and domain categories.

Keys of SYNONYMS are already in cleaned form (lowercase, no dots or underscores, single
spaces). Every canonical value maps to itself so normalization stays idempotent.
"""

from __future__ import annotations


# Libraries and minor tooling that never count as a core skill.
EXCLUDED_TOOLS: frozenset[str] = frozenset(
    {
        # http clients
        "axios", "fetch", "superagent", "got", "ky", "request",
        # build tools
        "vite", "webpack", "parcel", "rollup", "esbuild", "turbopack", "snowpack", "browserify",
        # routing
        "react-router", "react router", "vue-router", "vue router",
        # react ecosystem
        "react query", "react-query", "reactquery", "react testing library", "react-testing-library", "preact",
        # state management
        "zustand", "jotai", "recoil", "valtio", "nanostores",
        # ui kits
        "material-ui", "mui", "ant-design", "antd", "chakra-ui", "chakra", "shadcn", "shadcn-ui",
        "semantic-ui", "semantic ui", "foundation",
        # minor test libraries
        "vitest", "testing-library", "enzyme", "chai", "sinon", "jasmine",
        # utilities
        "lodash", "underscore", "moment", "dayjs", "date-fns", "ramda",
        # css-in-js
        "styled-components", "styled components", "emotion",
        "scss",
        # package managers
        "npm", "yarn", "pnpm", "bun", "gem", "pip", "composer", "cargo",
        # vector stores
        "faiss", "pinecone", "weaviate", "chromadb", "milvus",
        # minor hosting platforms
        "oci", "oracle cloud", "digitalocean", "linode", "heroku", "netlify", "vercel", "cloudflare workers",
        # linters and formatters
        "eslint", "prettier", "tslint", "stylelint",
        "gin",
        "hadoop", "mapreduce", "hive", "pig", "hbase",
        "r", "r language", "rstudio",
        # misc
        "nodemon", "pm2", "dotenv", "cors", "helmet",
        "cheerio", "puppeteer", "playwright",
        "multer", "bcrypt", "jsonwebtoken", "jwt",
        "husky", "lint-staged", "commitlint",
    }
)


def _aliases(canonical: str, *aliases: str) -> dict[str, str]:
    out = {canonical: canonical}
    for alias in aliases:
        out[alias] = canonical
    return out


SYNONYMS: dict[str, str] = {
    **_aliases("javascript", "js", "ecmascript", "es6", "es2015", "es2020"),
    **_aliases("typescript", "ts"),
    **_aliases("nodejs", "node", "node js"),
    **_aliases("react", "reactjs", "react js"),
    **_aliases("nextjs", "next js"),
    **_aliases("vue", "vuejs", "vue js"),
    **_aliases("angular", "angularjs", "angular2", "angular 2"),
    **_aliases("django"),
    **_aliases("flask"),
    **_aliases("fastapi", "fast api"),
    **_aliases("spring"),
    **_aliases("spring boot", "springboot"),
    **_aliases("react native", "reactnative", "react-native", "rn"),
    **_aliases("express", "expressjs"),
    **_aliases("nestjs", "nest js"),
    **_aliases("kubernetes", "k8s", "kube"),
    **_aliases("postgresql", "postgres", "psql"),
    **_aliases("mongodb", "mongo", "mongo db"),
    **_aliases("mysql", "my sql"),
    **_aliases("redis"),
    **_aliases("aws", "amazon web services"),
    **_aliases("azure", "microsoft azure"),
    **_aliases("gcp", "google cloud", "google cloud platform"),
    **_aliases("python", "python3", "py"),
    **_aliases("java"),
    **_aliases("c++", "cpp", "cplusplus"),
    **_aliases("c#", "csharp", "c sharp"),
    **_aliases("go", "golang"),
    **_aliases("rust"),
    **_aliases("php"),
    **_aliases("ruby"),
    **_aliases("ruby on rails", "rails", "ror"),
    **_aliases("swift"),
    **_aliases("kotlin"),
    **_aliases("rest api", "rest", "restapi", "rest-api", "restful", "restful api"),
    **_aliases("graphql", "graph ql"),
    **_aliases("ci/cd", "cicd", "ci cd", "ci-cd", "continuous integration", "continuous deployment"),
    **_aliases("machine learning", "ml", "machinelearning"),
    **_aliases("deep learning", "dl", "deeplearning"),
    **_aliases("artificial intelligence", "ai"),
    **_aliases("data science", "datascience"),
    **_aliases("natural language processing", "nlp"),
    **_aliases("computer vision", "cv"),
    **_aliases("sql", "structured query language"),
    **_aliases("html", "html5"),
    **_aliases("css", "css3"),
    **_aliases("sass"),
    **_aliases("tailwind", "tailwindcss", "tailwind css"),
    **_aliases("bootstrap"),
    **_aliases("git", "version control"),
    **_aliases("docker", "containerization"),
    **_aliases("terraform"),
    **_aliases("ansible"),
    **_aliases("jenkins"),
    **_aliases("tensorflow", "tf"),
    **_aliases("pytorch", "torch"),
    **_aliases("pandas"),
    **_aliases("numpy"),
    **_aliases("scikit-learn", "sklearn", "scikit learn", "scikitlearn"),
    **_aliases("jest"),
    **_aliases("mocha"),
    **_aliases("cypress"),
    **_aliases("selenium"),
    **_aliases("pytest"),
    **_aliases("redux"),
    **_aliases("mobx"),
    **_aliases("vuex"),
    **_aliases("agile"),
    **_aliases("scrum"),
    **_aliases("kanban"),
    **_aliases("microservices", "micro services", "microservice"),
    **_aliases("linux"),
    **_aliases("spark", "apache spark"),
}


SKILL_CATEGORIES: dict[str, tuple[str, ...]] = {
    "frontend": ("javascript", "typescript", "react", "vue", "angular", "html", "css", "sass", "tailwind"),
    "backend": ("nodejs", "python", "java", "go", "rust", "php", "ruby", "django", "flask", "spring", "express"),
    "database": ("sql", "postgresql", "mysql", "mongodb", "redis", "oracle", "dynamodb"),
    "cloud": ("aws", "azure", "gcp", "docker", "kubernetes", "terraform"),
    "mobile": ("react native", "flutter", "ios", "android", "swift", "kotlin"),
    "data": ("python", "machine learning", "artificial intelligence", "tensorflow", "pytorch", "pandas"),
}


# Canonical skills with no aliases that fuzzy matching should still resolve to.
EXTRA_KNOWN_SKILLS: tuple[str, ...] = (
    "sqlite",
    "oracle",
    "dynamodb",
    "cassandra",
    "elasticsearch",
    "laravel",
    "jira",
    "figma",
    "postman",
    "flutter",
    "ios",
    "android",
)
