def root_domain(hostname: str) -> str:
    """
    Return the domain a session cookie should be scoped to so every
    subdomain of a site shares it.

    Examples:
        root_domain("localhost")      -> "localhost"
        root_domain("www.abc.com")    -> "abc.com"
        root_domain("www.abc.co.kr")  -> "abc.co.kr"

    Two 2-letter trailing labels are taken to be a country code second level
    domain (co.kr, or.jp) and the label before them is kept. This is a plain
    label heuristic, there is no public suffix lookup.
    """
    labels = hostname.split(".")
    if len(labels) <= 2:
        return hostname
    second, top = labels[-2], labels[-1]
    if len(second) == 2 and len(top) == 2:
        return ".".join(labels[-3:])
    return f"{second}.{top}"
