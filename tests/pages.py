"""Builders for small Hacker News pages, close to the markup the site serves."""

from typing import Optional

AGE_TITLE = "2024-01-10T12:00:00 1704888000"


def story_rows(
    story_id: int,
    title: str = "A story",
    href: str = "https://example.com/post",
    site: Optional[str] = "example.com",
    score: Optional[str] = "521 points",
    user: Optional[str] = "pg",
    age_title: Optional[str] = AGE_TITLE,
    age_text: str = "3 hours ago",
    comments: Optional[str] = "42&nbsp;comments",
    token: Optional[str] = None,
    voted: bool = False,
) -> str:
    arrow = ""
    if token is not None:
        css = "clicky nosee" if voted else "clicky"
        arrow = (
            f'<a id="up_{story_id}" class="{css}" '
            f'href="vote?id={story_id}&amp;how=up&amp;auth={token}&amp;goto=news">'
            '<div class="votearrow" title="upvote"></div></a>'
        )
    sitebit = ""
    if site:
        sitebit = (
            f' <span class="sitebit comhead">(<a href="from?site={site}">'
            f'<span class="sitestr">{site}</span></a>)</span>'
        )
    score_html = f'<span class="score" id="score_{story_id}">{score}</span> ' if score else ""
    user_html = f'by <a href="user?id={user}" class="hnuser">{user}</a> ' if user else ""
    age_attr = f' title="{age_title}"' if age_title else ""
    comments_html = f' | <a href="item?id={story_id}">{comments}</a>' if comments else ""
    return f"""
<tr class="athing submission" id="{story_id}">
  <td align="right" valign="top" class="title"><span class="rank">1.</span></td>
  <td valign="top" class="votelinks"><center>{arrow}</center></td>
  <td class="title"><span class="titleline"><a href="{href}">{title}</a>{sitebit}</span></td>
</tr>
<tr>
  <td colspan="2"></td>
  <td class="subtext"><span class="subline">
    {score_html}{user_html}<span class="age"{age_attr}><a href="item?id={story_id}">{age_text}</a></span>
    <span id="unv_{story_id}"></span> | <a href="hide?id={story_id}&amp;goto=news">hide</a>{comments_html}
  </span></td>
</tr>
<tr class="spacer" style="height:5px"></tr>
"""


def listing_page(*rows: str) -> str:
    return f"""<html><head><title>Hacker News</title></head><body><center>
<table id="hnmain" border="0" cellpadding="0" cellspacing="0" width="85%">
<tr><td><table><tr><td><span class="pagetop"><b class="hnname">Hacker News</b></span></td></tr></table></td></tr>
<tr id="pagespace" title="" style="height:10px"></tr>
<tr id="bigbox"><td><table border="0" cellpadding="0" cellspacing="0">
{"".join(rows)}
<tr class="morespace" style="height:10px"></tr>
</table></td></tr>
</table></center></body></html>"""


def comment_row(
    comment_id: int,
    indent: int = 0,
    user: Optional[str] = "alice",
    body: Optional[str] = "Nice <i>work</i>.",
    age_text: str = "2 hours ago",
    age_title: Optional[str] = AGE_TITLE,
    indent_attr: bool = True,
    placeholder: Optional[str] = None,
) -> str:
    if indent_attr:
        ind = f'<td class="ind" indent="{indent}"><img src="s.gif" height="1" width="{indent * 40}"></td>'
    else:
        ind = f'<td class="ind"><img src="s.gif" height="1" width="{indent * 40}"></td>'
    user_html = f'<a href="user?id={user}" class="hnuser">{user}</a> ' if user else ""
    age_attr = f' title="{age_title}"' if age_title else ""
    if body is not None:
        text = (
            f'<div class="commtext c00">{body}</div>'
            '<div class="reply"><p><font size="1"><u>'
            f'<a href="reply?id={comment_id}&amp;goto=item">reply</a></u></font></p></div>'
        )
    else:
        text = placeholder or ""
    return f"""
<tr class="athing comtr" id="{comment_id}"><td><table border="0"><tr>
  {ind}
  <td valign="top" class="votelinks"></td>
  <td class="default"><div style="margin-top:2px; margin-bottom:-10px;"><span class="comhead">
    {user_html}<span class="age"{age_attr}><a href="item?id={comment_id}">{age_text}</a></span>
  </span></div><br><div class="comment">{text}</div></td>
</tr></table></td></tr>
"""


def item_page(header: str = "", toptext: Optional[str] = None, comments: str = "") -> str:
    fatitem = ""
    if header:
        body_row = ""
        if toptext is not None:
            body_row = f'<tr><td colspan="2"></td><td><div class="toptext">{toptext}</div></td></tr>'
        fatitem = f"""<table class="fatitem" border="0">
{header}
{body_row}
<tr style="height:10px"></tr>
<tr><td colspan="2"></td><td><form action="comment" method="post"><textarea name="text"></textarea></form></td></tr>
</table><br><br>"""
    return f"""<html><body><center>
<table id="hnmain" border="0" cellpadding="0" cellspacing="0" width="85%">
<tr id="pagespace" title="" style="height:10px"></tr>
<tr><td>{fatitem}
<table border="0" class="comment-tree">
{comments}
</table>
</td></tr>
</table></center></body></html>"""


def user_page(
    username: str = "pg",
    created_href: Optional[str] = "front?day=2006-10-09&amp;birth=pg",
    created_text: str = "October 9, 2006",
    karma: Optional[str] = "157236",
    about: Optional[str] = "Bug fixer.",
) -> str:
    rows = [
        f'<tr class="athing"><td valign="top">user:</td>'
        f'<td timestamp="1160418092"><a href="user?id={username}" class="hnuser">{username}</a></td></tr>'
    ]
    if created_href is not None:
        rows.append(
            f'<tr><td valign="top">created:</td><td><a href="{created_href}">{created_text}</a></td></tr>'
        )
    else:
        rows.append(f'<tr><td valign="top">created:</td><td>{created_text}</td></tr>')
    if karma is not None:
        rows.append(f'<tr><td valign="top">karma:</td><td>{karma}</td></tr>')
    if about is not None:
        rows.append(f'<tr><td valign="top">about:</td><td style="overflow:hidden;">{about}</td></tr>')
    rows.append(f'<tr><td></td><td><a href="submitted?id={username}"><u>submissions</u></a></td></tr>')
    return f"""<html><body><center>
<table id="hnmain" border="0" cellpadding="0" cellspacing="0" width="85%">
<tr><td><table border="0">
{"".join(rows)}
</table></td></tr>
</table></center></body></html>"""


NO_SUCH_USER = "<html><body>No such user.</body></html>"

LOGIN_TO_VOTE = """<html><body>You have to be logged in to vote.<br><br>
<b>Login</b><br><br><form action="vote" method="post">
<input type="hidden" name="id" value="1"><input type="text" name="acct">
<input type="password" name="pw"></form></body></html>"""
