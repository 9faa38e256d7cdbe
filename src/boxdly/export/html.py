from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Iterable

from boxdly.ingest.letterboxd.parse import FilmRecord
from boxdly.month import YearMonth


def render_results_html(
    username: str,
    month: YearMonth,
    films: Iterable[FilmRecord],
    out_path: Path,
) -> None:
    payload = {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "username": username,
        "month": str(month),
        "films": [film.to_dict() for film in films],
    }
    # keep "</script>" inside titles from closing the data block
    data_json = json.dumps(payload, ensure_ascii=True).replace("</", "<\\/")
    html = _HTML_TEMPLATE.replace("/*__DATA__*/", data_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html, encoding="utf-8")


_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Boxdly</title>
    <style>
      body {
        margin: 0;
        padding: 28px clamp(16px, 5vw, 80px);
        font-family: Georgia, serif;
        background: #14181c;
        color: #e8ecef;
      }

      h1 { margin: 0 0 4px; font-size: 24px; }

      .subtitle, .meta, .empty {
        font-family: ui-monospace, Menlo, monospace;
        font-size: 12px;
        color: #9ab;
      }

      .posters {
        display: grid;
        grid-template-columns: repeat(4, minmax(0, 1fr));
        gap: 16px;
        margin-top: 20px;
      }

      .film { color: inherit; text-decoration: none; }

      .film img {
        width: 100%;
        aspect-ratio: 2 / 3;
        object-fit: cover;
        border-radius: 4px;
        background: #2c3440;
      }

      .film .title { margin-top: 6px; font-weight: bold; }
      .film .stars { color: #00c030; }

      @media (max-width: 700px) {
        .posters { grid-template-columns: repeat(2, minmax(0, 1fr)); }
      }
    </style>
  </head>
  <body>
    <header>
      <h1 id="heading"></h1>
      <div class="subtitle" id="subtitle"></div>
    </header>

    <section class="posters" id="posters"></section>

    <script id="films-data" type="application/json">/*__DATA__*/</script>
    <script>
      window.addEventListener("DOMContentLoaded", () => {
        let data;
        try {
          const raw = document.getElementById("films-data").textContent || "{}";
          data = JSON.parse(raw);
        } catch (err) {
          console.error("Failed to parse films data", err);
          data = { username: "unknown", month: "", generated_at: "", films: [] };
        }

        document.getElementById("heading").textContent = `${data.username}: top films of ${data.month}`;
        document.getElementById("subtitle").textContent = `Last Updated: ${data.generated_at}`;

        const posters = document.getElementById("posters");
        if (!data.films.length) {
          const empty = document.createElement("p");
          empty.className = "empty";
          empty.textContent = "No rated films for this month.";
          posters.replaceWith(empty);
          return;
        }

        const stars = (rating) => "\\u2605".repeat(Math.floor(rating / 2)) + (rating % 2 ? "\\u00bd" : "");

        data.films.forEach((film) => {
          const card = document.createElement("a");
          card.className = "film";
          card.href = film.film_url;

          const img = document.createElement("img");
          img.src = film.poster_url;
          img.alt = film.title;
          card.appendChild(img);

          const title = document.createElement("div");
          title.className = "title";
          title.textContent = film.title;
          card.appendChild(title);

          const meta = document.createElement("div");
          meta.className = "meta";
          meta.textContent = film.year || "-";
          const rating = document.createElement("span");
          rating.className = "stars";
          rating.textContent = ` ${stars(film.rating)}`;
          meta.appendChild(rating);
          card.appendChild(meta);

          posters.appendChild(card);
        });
      });
    </script>
  </body>
</html>
"""
